from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.errors import result_response
from core.permissions import IsFestAdmin
from events import services
from events.models import EventRegistration
from events.serializers import EventRegistrationSerializer, RegistrationResultSerializer


class RegisterEventView(APIView):
    """
    POST /api/events/<slug>/register/

    Registers the caller's team. Safe to repeat: a second call answers
    200 with already_registered=true.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, slug):
        return result_response(services.register_for_event(request.user, slug))


class MyEventRegistrationsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"registered_slugs": services.get_user_event_registrations(request.user)})


class EventRegistrationListView(APIView):
    """Admin table of every team registration"""
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def get(self, request):
        registrations = EventRegistration.objects.select_related("event", "team").order_by("-registered_at")

        event_slug = request.query_params.get("event")
        if event_slug:
            registrations = registrations.filter(event__slug=event_slug)

        return Response(EventRegistrationSerializer(registrations, many=True).data)


class EventRegistrationUpdateView(APIView):
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def patch(self, request, registration_id):
        serializer = RegistrationResultSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.update_event_registration(
            request.user,
            registration_id,
            score=serializer.validated_data.get("score"),
            rank=serializer.validated_data.get("rank"),
        )
        return result_response(result)
