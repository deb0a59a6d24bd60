from rest_framework import serializers

from events.sanitizers import sanitize_text
from .models import ContactSubmission


class ContactSubmissionSerializer(serializers.ModelSerializer):
    """
    Public form input. All four fields are required; text is stripped of
    control characters.
    """
    class Meta:
        model = ContactSubmission
        fields = ["id", "name", "email", "subject", "message", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_name(self, value):
        return self._required_text(value, 255)

    def validate_subject(self, value):
        return self._required_text(value, 255)

    def validate_message(self, value):
        return self._required_text(value, 5000)

    def _required_text(self, value, max_length):
        value = sanitize_text(value, max_length=max_length)
        if not value:
            raise serializers.ValidationError("This field may not be blank.")
        return value
