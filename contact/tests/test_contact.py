# contact/tests/test_contact.py

from datetime import timedelta
from unittest import mock

from django.core.cache import cache
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from contact.models import ContactSubmission
from core.testing import make_user


class ContactSubmitTests(APITestCase):
    def setUp(self):
        cache.clear()

    def payload(self, **overrides):
        data = {
            "name": "Dana Rao",
            "email": "dana@college.edu",
            "subject": "HackAway team size",
            "message": "Can a team of five register?",
        }
        data.update(overrides)
        return data

    def test_anonymous_submission_is_stored(self):
        resp = self.client.post("/api/contact/", self.payload(), format="json")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.json()["ok"])
        submission = ContactSubmission.objects.get()
        self.assertEqual(submission.subject, "HackAway team size")
        self.assertEqual(submission.email, "dana@college.edu")

    def test_missing_fields_rejected(self):
        for field in ("name", "email", "subject", "message"):
            data = self.payload()
            del data[field]
            resp = self.client.post("/api/contact/", data, format="json")
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, field)
            self.assertEqual(resp.json()["kind"], "InvalidInput")

        resp = self.client.post("/api/contact/", self.payload(message="   "), format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.post("/api/contact/", self.payload(email="not-an-email"), format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        self.assertFalse(ContactSubmission.objects.exists())

    def test_control_characters_stripped(self):
        self.client.post("/api/contact/", self.payload(subject="Hello\x00 there\x07"), format="json")

        self.assertEqual(ContactSubmission.objects.get().subject, "Hello there")

    def test_submissions_are_throttled(self):
        with mock.patch("rest_framework.throttling.ScopedRateThrottle.THROTTLE_RATES", {"contact": "2/minute"}):
            for _ in range(2):
                self.assertEqual(self.client.post("/api/contact/", self.payload(), format="json").status_code, 201)

            resp = self.client.post("/api/contact/", self.payload(), format="json")

        self.assertEqual(resp.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(ContactSubmission.objects.count(), 2)


class ContactInboxTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.admin = make_user("admin", role="admin")
        self.user = make_user("user")

    def test_admin_sees_newest_first(self):
        older = ContactSubmission.objects.create(
            name="A", email="a@example.com", subject="First", message="one"
        )
        ContactSubmission.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))
        ContactSubmission.objects.create(name="B", email="b@example.com", subject="Second", message="two")
        self.client.force_authenticate(user=self.admin)

        resp = self.client.get("/api/contact/admin/")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row["subject"] for row in resp.json()], ["Second", "First"])

    def test_inbox_is_admin_only(self):
        self.client.force_authenticate(user=self.user)
        self.assertEqual(self.client.get("/api/contact/admin/").status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get("/api/contact/admin/").status_code, status.HTTP_401_UNAUTHORIZED)
