from rest_framework import serializers

from .models import Event, EventRegistration
from .sanitizers import sanitize_text


class EventSerializer(serializers.ModelSerializer):
    """Public event card"""
    is_registered = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "category",
            "date",
            "start_time",
            "end_time",
            "max_score",
            "is_registered",
        ]
        read_only_fields = fields

    def get_is_registered(self, obj):
        # Views pass the caller's registered slugs to avoid one query per event
        return obj.slug in self.context.get("registered_slugs", ())


class EventFormSerializer(serializers.ModelSerializer):
    """
    Admin create/update form.

    - name and slug are required
    - max_score >= 0, default 100
    - end_time must be after start_time
    """
    class Meta:
        model = Event
        fields = [
            "name",
            "slug",
            "description",
            "category",
            "date",
            "start_time",
            "end_time",
            "max_score",
            "is_active",
        ]
        extra_kwargs = {
            # Uniqueness is reported by the service
            "slug": {"validators": []},
            "max_score": {"min_value": 0},
        }

    def validate_name(self, value):
        value = sanitize_text(value, max_length=255)
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_description(self, value):
        return sanitize_text(value)

    def validate(self, attrs):
        start = attrs.get("start_time")
        end = attrs.get("end_time")

        # When updating, fall back to existing values if one is missing
        if self.instance is not None:
            if start is None:
                start = self.instance.start_time
            if end is None:
                end = self.instance.end_time

        if start and end and end <= start:
            raise serializers.ValidationError(
                {"end_time": "End time must be after start time."}
            )

        return attrs


class EventRegistrationSerializer(serializers.ModelSerializer):
    event_name = serializers.CharField(source="event.name", read_only=True)
    event_slug = serializers.CharField(source="event.slug", read_only=True)
    team_name = serializers.CharField(source="team.name", read_only=True)

    class Meta:
        model = EventRegistration
        fields = ["id", "event_name", "event_slug", "team_name", "score", "rank", "registered_at"]
        read_only_fields = fields


class RegistrationResultSerializer(serializers.Serializer):
    score = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    rank = serializers.IntegerField(required=False, allow_null=True, min_value=1)
