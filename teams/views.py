# fest-backend/teams/views.py - Team formation API

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.errors import result_response
from core.permissions import IsFestAdmin
from core.throttles import UserWriteThrottle
from . import services
from .serializers import (
    CreateTeamSerializer,
    IncomingJoinRequestSerializer,
    JoinTeamSerializer,
    OutgoingJoinRequestSerializer,
    TeamScoreSerializer,
    TeamSerializer,
)


class CreateTeamView(APIView):
    """
    POST /api/teams/
    Body: {"name": "Falcons"}
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [UserWriteThrottle]
    throttle_scope = "team-create"

    def post(self, request):
        serializer = CreateTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.create_team(request.user, serializer.validated_data["name"])
        return result_response(result, success_status=status.HTTP_201_CREATED)


class MyTeamView(APIView):
    """
    GET /api/teams/me/

    The caller's team and members; leaders also get the pending
    requests addressed to the team.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        team = services.get_user_team(request.user)
        if team is None:
            return Response({"team": None, "is_leader": False, "pending_requests": []})

        is_leader = team.leader_id == request.user.id
        pending = []
        if is_leader:
            pending = IncomingJoinRequestSerializer(
                services.get_pending_requests_for_team(team), many=True
            ).data

        return Response({
            "team": TeamSerializer(team).data,
            "is_leader": is_leader,
            "pending_requests": pending,
        })


class TeamDeleteView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, team_id):
        return result_response(services.delete_team(request.user, team_id))


class JoinRequestCreateView(APIView):
    """
    POST /api/teams/join-requests/
    Body: {"slug": "falcons-x7y2z9"}
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [UserWriteThrottle]
    throttle_scope = "team-join-request"

    def post(self, request):
        serializer = JoinTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.request_join(request.user, serializer.validated_data["slug"])
        return result_response(result, success_status=status.HTTP_201_CREATED)


class MyJoinRequestsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        requests_qs = services.get_user_join_requests(request.user)
        return Response(OutgoingJoinRequestSerializer(requests_qs, many=True).data)


class AcceptJoinRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, request_id):
        return result_response(services.accept_join_request(request.user, request_id))


class RejectJoinRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, request_id):
        return result_response(services.reject_join_request(request.user, request_id))


class RemoveMemberView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, user_id):
        return result_response(services.remove_member(request.user, user_id))


class LeaveTeamView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        return result_response(services.leave_team(request.user))


class LeaderboardView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(services.get_leaderboard())


class TeamBySlugView(APIView):
    """Public team card, e.g. for a shared invite link"""
    permission_classes = [AllowAny]

    def get(self, request, slug):
        team = services.get_team_by_slug(slug)
        if team is None:
            return Response(
                {"ok": False, "kind": "NotFound", "message": "Team not found with this code", "severity": "error"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(TeamSerializer(team).data)


class TeamScoreView(APIView):
    """
    POST /api/teams/<team_id>/score/
    Body: {"score": 120}
    """
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def post(self, request, team_id):
        serializer = TeamScoreSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.update_team_score(request.user, team_id, serializer.validated_data["score"])
        return result_response(result)
