# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_ADMIN = "admin"
    ROLE_MODERATOR = "moderator"
    ROLE_USER = "user"

    ROLE_CHOICES = (
        (ROLE_ADMIN, "Admin"),
        (ROLE_MODERATOR, "Moderator"),
        (ROLE_USER, "User"),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_USER,
    )

    # Profile fields collected after the first sign-in
    roll_no = models.CharField(max_length=32, blank=True, null=True)
    branch = models.CharField(max_length=100, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    image = models.CharField(max_length=1024, blank=True, default="")

    class Meta(AbstractUser.Meta):
        indexes = [
            models.Index(fields=["date_joined"], name="user_joined_idx"),
        ]

    def __str__(self):
        return self.username

    @property
    def display_name(self):
        full_name = self.get_full_name()
        if full_name:
            return full_name
        if self.email:
            return self.email.split("@")[0]
        return self.username
