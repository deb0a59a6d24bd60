# fest-backend/contact/models.py
from django.db import models


class ContactSubmission(models.Model):
    """A message left through the public contact form."""
    name = models.CharField(max_length=255)
    email = models.EmailField()
    subject = models.CharField(max_length=255)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["-created_at"], name="contact_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>: {self.subject}"
