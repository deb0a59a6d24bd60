# teams/tests/test_api.py

from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APITestCase

from core.throttles import UserWriteThrottle
from teams.models import JoinRequest, Team, TeamMembership

User = get_user_model()


class TeamApiTests(APITestCase):
    def setUp(self):
        # Throttle counters live in the cache
        cache.clear()
        self.leader = User.objects.create_user(
            username="leader", email="leader@example.com", password="pass1234"
        )
        self.bob = User.objects.create_user(
            username="bob", email="bob@example.com", password="pass1234"
        )
        self.admin = User.objects.create_user(
            username="admin", email="admin@example.com", password="pass1234", role="admin"
        )

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def create_team(self, name="Falcons"):
        self.auth(self.leader)
        resp = self.client.post("/api/teams/", {"name": name}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        return resp.json()["slug"]

    def test_create_requires_authentication(self):
        resp = self.client.post("/api/teams/", {"name": "Falcons"}, format="json")
        self.assertIn(resp.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(resp.json()["ok"])

    def test_create_and_view_my_team(self):
        slug = self.create_team()

        resp = self.client.get("/api/teams/me/")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["is_leader"])
        self.assertEqual(data["team"]["slug"], slug)
        self.assertEqual(data["team"]["member_count"], 1)
        self.assertEqual(data["team"]["members"][0]["role"], "leader")

    def test_second_create_is_conflict(self):
        self.create_team()
        resp = self.client.post("/api/teams/", {"name": "Hawks"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        body = resp.json()
        self.assertEqual(body["kind"], "AlreadyInTeam")
        self.assertEqual(body["severity"], "info")

    def test_join_accept_flow(self):
        slug = self.create_team()

        self.auth(self.bob)
        resp = self.client.post("/api/teams/join-requests/", {"slug": slug}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        request_id = resp.json()["request_id"]

        resp = self.client.get("/api/teams/join-requests/mine/")
        self.assertEqual(resp.json()[0]["status"], "pending")

        self.auth(self.leader)
        resp = self.client.get("/api/teams/me/")
        self.assertEqual([r["id"] for r in resp.json()["pending_requests"]], [request_id])

        resp = self.client.post(f"/api/teams/join-requests/{request_id}/accept/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["team_size"], 2)

        resp = self.client.post(f"/api/teams/join-requests/{request_id}/reject/")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["kind"], "RequestNotPending")

    def test_member_cannot_accept(self):
        slug = self.create_team()
        self.auth(self.bob)
        request_id = self.client.post(
            "/api/teams/join-requests/", {"slug": slug}, format="json"
        ).json()["request_id"]

        resp = self.client.post(f"/api/teams/join-requests/{request_id}/accept/")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(JoinRequest.objects.get(pk=request_id).status, "pending")

    def test_leave_and_remove(self):
        slug = self.create_team()
        team = Team.objects.get(slug=slug)
        TeamMembership.objects.create(team=team, user=self.bob)

        resp = self.client.post("/api/teams/leave/")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["kind"], "IsLeader")

        resp = self.client.delete(f"/api/teams/members/{self.bob.id}/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(TeamMembership.objects.filter(user=self.bob).exists())

    def test_delete_team(self):
        slug = self.create_team()
        team = Team.objects.get(slug=slug)

        self.auth(self.bob)
        resp = self.client.delete(f"/api/teams/{team.id}/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.leader)
        resp = self.client.delete(f"/api/teams/{team.id}/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(Team.objects.exists())

    def test_public_leaderboard_and_slug_lookup(self):
        slug = self.create_team()
        self.client.force_authenticate(user=None)

        resp = self.client.get("/api/teams/leaderboard/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()[0]["slug"], slug)

        resp = self.client.get(f"/api/teams/slug/{slug}/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Falcons")

        resp = self.client.get("/api/teams/slug/missing-000000/")
        self.assertEqual(resp.status_code, 404)

    def test_score_update_is_admin_only(self):
        slug = self.create_team()
        team = Team.objects.get(slug=slug)

        resp = self.client.post(f"/api/teams/{team.id}/score/", {"score": 30}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.admin)
        resp = self.client.post(f"/api/teams/{team.id}/score/", {"score": 30}, format="json")
        self.assertEqual(resp.status_code, 200)
        team.refresh_from_db()
        self.assertEqual(team.score, 30)

    def test_create_is_throttled_per_user(self):
        rates = {"team-create": "1/minute", "team-join-request": "1/minute", "hackaway-register": "1/minute"}
        with mock.patch.object(UserWriteThrottle, "THROTTLE_RATES", rates):
            self.create_team()
            resp = self.client.post("/api/teams/", {"name": "Hawks"}, format="json")

            self.assertEqual(resp.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
            self.assertEqual(resp.json()["kind"], "RateLimited")

            # Reads and other users are not counted
            self.assertEqual(self.client.get("/api/teams/me/").status_code, 200)
            self.auth(self.bob)
            resp = self.client.post("/api/teams/", {"name": "Hawks"}, format="json")
            self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
