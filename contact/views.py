# contact/views.py - Public contact form + admin inbox

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsFestAdmin
from .models import ContactSubmission
from .serializers import ContactSubmissionSerializer

logger = logging.getLogger("fest.contact")


class ContactSubmitView(APIView):
    """
    POST /api/contact/
    Body: {"name", "email", "subject", "message"}
    """
    permission_classes = [AllowAny]
    throttle_scope = "contact"

    def post(self, request):
        serializer = ContactSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = serializer.save()

        logger.info(f"Contact submission received: id={submission.id}, email={submission.email}")
        return Response(
            {"ok": True, "message": "Thanks for reaching out! We'll get back to you soon.", "id": submission.id},
            status=status.HTTP_201_CREATED,
        )


class ContactSubmissionListView(APIView):
    """Admin inbox, newest first"""
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def get(self, request):
        submissions = ContactSubmission.objects.order_by("-created_at", "-id")
        return Response(ContactSubmissionSerializer(submissions, many=True).data)
