# fest-backend/hackaway/views.py

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.errors import result_response
from core.permissions import IsFestAdmin
from core.throttles import UserWriteThrottle
from teams.models import TeamMembership
from . import services
from .models import HackawayRegistration
from .serializers import (
    HackawayRegisterSerializer,
    HackawayRegistrationSerializer,
    ProblemStatementUpdateSerializer,
    RegistrationJudgingSerializer,
)


class ProblemStatementListView(APIView):
    """
    GET /api/hackaway/problem-statements/

    Every track with its cap and live count. `is_full` is count >= max,
    which also covers a cap lowered below the current count.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        stats = services.get_registration_stats()
        data = []
        for ps in services.get_problem_statement_settings():
            track = stats[ps["id"]]
            data.append({
                **ps,
                "registered_count": track["count"],
                "is_full": track["is_full"],
            })
        return Response(data)


class HackawayRegisterView(APIView):
    """
    POST /api/hackaway/register/
    Body: {"problem_statement_no": 4}
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [UserWriteThrottle]
    throttle_scope = "hackaway-register"

    def post(self, request):
        serializer = HackawayRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.register_for_hackaway(
            request.user, serializer.validated_data["problem_statement_no"]
        )
        return result_response(result, success_status=status.HTTP_201_CREATED)


class MyHackawayView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(services.check_registration(request.user))


class AdminProblemStatementView(APIView):
    """
    POST /api/hackaway/admin/problem-statements/<no>/
    Body: {"max_participants": 12} and/or {"is_active": false}
    """
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def post(self, request, problem_statement_no):
        serializer = ProblemStatementUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = serializer.validated_data

        result = None
        if "max_participants" in changes:
            result = services.set_max_participants(
                request.user, problem_statement_no, changes["max_participants"]
            )
            if not result.ok:
                return result_response(result)

        if "is_active" in changes:
            result = services.set_problem_statement_active(
                request.user, problem_statement_no, changes["is_active"]
            )

        return result_response(result)


class AdminRegistrationListView(APIView):
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def get(self, request):
        registrations = (
            HackawayRegistration.objects
            .select_related("team")
            .prefetch_related(
                Prefetch(
                    "team__memberships",
                    queryset=TeamMembership.objects.select_related("user").order_by("joined_at"),
                )
            )
            .order_by("problem_statement_no", "registered_at")
        )

        track = request.query_params.get("problem_statement_no")
        if track:
            registrations = registrations.filter(problem_statement_no=track)

        titles = {ps["id"]: ps["title"] for ps in services.get_problem_statement_settings()}
        serializer = HackawayRegistrationSerializer(registrations, many=True, context={"titles": titles})
        return Response(serializer.data)


class AdminRegistrationUpdateView(APIView):
    """
    PATCH /api/hackaway/admin/registrations/<id>/
    Body: any of rank, is_qualified, ppt_link
    """
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def patch(self, request, registration_id):
        serializer = RegistrationJudgingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.update_hackaway_registration(
            request.user, registration_id, **serializer.validated_data
        )
        return result_response(result)
