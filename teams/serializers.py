# fest-backend/teams/serializers.py

from rest_framework import serializers

from .models import JoinRequest, Team, TeamMembership


class TeamMemberSerializer(serializers.ModelSerializer):
    """One row of a team's member list"""
    user_id = serializers.IntegerField(source='user.id', read_only=True)
    name = serializers.CharField(source='user.display_name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    image = serializers.CharField(source='user.image', read_only=True)

    class Meta:
        model = TeamMembership
        fields = ['user_id', 'name', 'email', 'image', 'role', 'joined_at']
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    members = serializers.SerializerMethodField()
    leader_id = serializers.IntegerField(source='leader.id', read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = ['id', 'name', 'slug', 'leader_id', 'score', 'member_count', 'members', 'created_at']
        read_only_fields = fields

    def _memberships(self, obj):
        return obj.memberships.select_related('user').order_by('joined_at')

    def get_members(self, obj):
        return TeamMemberSerializer(self._memberships(obj), many=True).data

    def get_member_count(self, obj):
        return obj.memberships.count()


class IncomingJoinRequestSerializer(serializers.ModelSerializer):
    """Pending request as the team leader sees it"""
    user_id = serializers.IntegerField(source='user.id', read_only=True)
    name = serializers.CharField(source='user.display_name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    image = serializers.CharField(source='user.image', read_only=True)

    class Meta:
        model = JoinRequest
        fields = ['id', 'user_id', 'name', 'email', 'image', 'status', 'created_at']
        read_only_fields = fields


class OutgoingJoinRequestSerializer(serializers.ModelSerializer):
    """Request as the applicant sees it"""
    team_name = serializers.CharField(source='team.name', read_only=True)
    team_slug = serializers.CharField(source='team.slug', read_only=True)

    class Meta:
        model = JoinRequest
        fields = ['id', 'team_name', 'team_slug', 'status', 'created_at', 'resolved_at']
        read_only_fields = fields


class CreateTeamSerializer(serializers.Serializer):
    # Blank names are reported by the service with its own message
    name = serializers.CharField(max_length=100, allow_blank=True, trim_whitespace=True)


class JoinTeamSerializer(serializers.Serializer):
    slug = serializers.CharField(max_length=120, allow_blank=True, trim_whitespace=True)


class TeamScoreSerializer(serializers.Serializer):
    score = serializers.IntegerField()
