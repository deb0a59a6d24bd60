from rest_framework import serializers

from .constants import DEFAULTS_BY_ID
from .models import HackawayRegistration


class HackawayRegisterSerializer(serializers.Serializer):
    problem_statement_no = serializers.IntegerField()


class ProblemStatementUpdateSerializer(serializers.Serializer):
    max_participants = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide max_participants and/or is_active.")
        return attrs


class RegistrationJudgingSerializer(serializers.Serializer):
    rank = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    is_qualified = serializers.BooleanField(required=False)
    ppt_link = serializers.URLField(required=False, allow_null=True, allow_blank=True, max_length=1024)

    def validate_ppt_link(self, value):
        return value or None


class HackawayRegistrationSerializer(serializers.ModelSerializer):
    """Admin table row"""
    team_name = serializers.CharField(source="team.name", read_only=True)
    team_slug = serializers.CharField(source="team.slug", read_only=True)
    problem_statement_title = serializers.SerializerMethodField()
    members = serializers.SerializerMethodField()

    class Meta:
        model = HackawayRegistration
        fields = [
            "id",
            "team_name",
            "team_slug",
            "problem_statement_no",
            "problem_statement_title",
            "slot",
            "rank",
            "is_qualified",
            "ppt_link",
            "registered_at",
            "members",
        ]
        read_only_fields = fields

    def get_problem_statement_title(self, obj):
        titles = self.context.get("titles") or {}
        default = DEFAULTS_BY_ID.get(obj.problem_statement_no, {})
        return titles.get(obj.problem_statement_no, default.get("title"))

    def get_members(self, obj):
        return [
            {"name": m.user.display_name, "email": m.user.email, "role": m.role}
            for m in obj.team.memberships.all()
        ]
