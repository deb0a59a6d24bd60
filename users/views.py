# users/views.py - Profile + role management

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django.shortcuts import get_object_or_404
from django.contrib.auth import get_user_model

from core.permissions import IsFestAdmin
from .serializers import UserSerializer, UpdateProfileSerializer, RoleUpdateSerializer

User = get_user_model()

logger = logging.getLogger("fest")


class MeView(APIView):
    """
    GET   /api/users/me/  current user info
    PATCH /api/users/me/  edit profile (name, roll number, branch, phone)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)

    def patch(self, request):
        serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response(UserSerializer(request.user).data)


class UserRoleUpdateView(APIView):
    """
    POST /api/users/role/
    Body: {"user_id": 3, "role": "admin" | "moderator" | "user"}
    """
    permission_classes = [IsAuthenticated, IsFestAdmin]

    def post(self, request):
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = get_object_or_404(User, pk=serializer.validated_data["user_id"])
        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role"])

        logger.info(f"Role updated: user={user.id}, role={user.role}, by={request.user.id}")
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
