# fest-backend/core/authentication.py
# DRF authentication class that trusts the identity provider's JWT

import logging

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger("fest")

User = get_user_model()


class IdentityProviderJWTAuthentication(BaseAuthentication):
    """
    Validates the identity assertion issued by the external identity
    provider (OAuth sign-in happens there, not here).

    This authenticator:
    1. Extracts the JWT from the Authorization header
    2. Verifies the token signature with IDENTITY_JWT_SECRET
    3. Looks up the local user by email, creating it on first sign-in
    """
    keyword = "Bearer"

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith(f"{self.keyword} "):
            return None  # Let other auth backends handle it

        token = auth_header.split(" ", 1)[1]

        secret = getattr(settings, "IDENTITY_JWT_SECRET", None)
        if not secret:
            logger.warning("IDENTITY_JWT_SECRET not configured")
            return None

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=["HS256"],
                audience=settings.IDENTITY_JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid identity token: {e}")
            return None  # Let other auth backends try

        if not payload.get("sub"):
            raise AuthenticationFailed("Invalid token: missing user ID")

        user = self._get_or_create_user(payload)
        return (user, payload)

    def authenticate_header(self, request):
        return self.keyword

    def _get_or_create_user(self, payload: dict):
        """
        Email is the stable identifier shared with the identity provider.
        The display name claim seeds first/last name on first sign-in only.
        """
        email = payload.get("email")
        if not email:
            raise AuthenticationFailed("Token missing email claim")

        user = User.objects.filter(email__iexact=email).first()
        if user is not None:
            return user

        base_username = email.split("@")[0][:140]
        username = base_username
        counter = 1
        while User.objects.filter(username=username).exists():
            username = f"{base_username}_{counter}"
            counter += 1

        first_name, _, last_name = (payload.get("name") or "").partition(" ")
        try:
            with transaction.atomic():
                user = User.objects.create(
                    username=username,
                    email=email,
                    first_name=first_name[:150],
                    last_name=last_name[:150],
                    image=payload.get("picture") or "",
                )
        except IntegrityError:
            # Two first requests for the same account raced on the username
            user = User.objects.filter(email__iexact=email).first()
            if user is None:
                raise AuthenticationFailed("Could not create account, please retry")
            return user

        logger.info(f"Created new user from identity provider: {email}")
        return user
