# events/views/events.py - Public listing + admin event management

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.errors import result_response
from core.permissions import IsFestAdmin
from events import services
from events.models import Event
from events.serializers import EventFormSerializer, EventSerializer


class EventListView(APIView):
    """
    GET /api/events/

    Active events; `is_registered` is filled in for signed-in callers.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        registered = ()
        if request.user.is_authenticated:
            registered = set(services.get_user_event_registrations(request.user))

        serializer = EventSerializer(
            services.list_active_events(),
            many=True,
            context={"request": request, "registered_slugs": registered},
        )
        return Response(serializer.data)


class AdminEventCreateView(APIView):
    """
    GET  /api/events/admin/  every event, including inactive ones
    POST /api/events/admin/  create
    """
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def get(self, request):
        events = Event.objects.order_by("-created_at")
        return Response(EventSerializer(events, many=True).data)

    def post(self, request):
        serializer = EventFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.create_event(request.user, serializer.validated_data)
        return result_response(result, success_status=status.HTTP_201_CREATED)


class AdminEventDetailView(APIView):
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def patch(self, request, event_id):
        event = get_object_or_404(Event, pk=event_id)
        serializer = EventFormSerializer(event, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        return result_response(services.update_event(request.user, event_id, serializer.validated_data))

    def delete(self, request, event_id):
        return result_response(services.delete_event(request.user, event_id))
