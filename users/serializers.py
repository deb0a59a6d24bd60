from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'name',
            'email',
            'role',
            'image',
            'date_joined',
            # Profile Fields
            'roll_no',
            'branch',
            'phone',
        ]


class UpdateProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'roll_no', 'branch', 'phone']

    def validate_phone(self, value):
        if value and not value.replace('+', '', 1).replace(' ', '').isdigit():
            raise serializers.ValidationError("Phone number may only contain digits, spaces and a leading +")
        return value


class RoleUpdateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
