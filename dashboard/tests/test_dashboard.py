# dashboard/tests/test_dashboard.py

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APITestCase

from core.testing import build_team, make_user
from dashboard import services
from events.models import Event, EventRegistration
from teams import services as team_services
from teams.models import Team

User = get_user_model()


class AdminStatsTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_counts(self):
        falcons = build_team("Falcons", 3)
        build_team("Owls", 2)
        team_services.request_join(make_user("dana"), "owls")
        event = Event.objects.create(name="Robo Race", slug="robo-race")
        EventRegistration.objects.create(event=event, team=falcons)

        stats = services.get_admin_stats()

        self.assertEqual(stats["total_users"], 6)
        self.assertEqual(stats["total_teams"], 2)
        self.assertEqual(stats["total_members"], 5)
        self.assertEqual(stats["pending_requests"], 1)
        self.assertEqual(stats["total_events"], 1)
        self.assertEqual(stats["total_registrations"], 1)
        self.assertEqual(stats["hackaway_registrations"], 0)
        self.assertEqual(stats["recent_users"], 6)
        self.assertEqual(stats["recent_teams"], 2)

    def test_recent_window(self):
        build_team("Old Guard", 2)
        long_ago = timezone.now() - timedelta(days=10)
        User.objects.update(date_joined=long_ago)
        Team.objects.update(created_at=long_ago)
        make_user("fresh")

        stats = services.get_admin_stats()

        self.assertEqual(stats["total_users"], 3)
        self.assertEqual(stats["recent_users"], 1)
        self.assertEqual(stats["recent_teams"], 0)

    def test_cached_until_invalidated(self):
        make_user("first")
        self.assertEqual(services.get_admin_stats()["total_users"], 1)

        make_user("second")
        self.assertEqual(services.get_admin_stats()["total_users"], 1)

        services.invalidate_dashboard_cache()
        self.assertEqual(services.get_admin_stats()["total_users"], 2)


class AnalyticsTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_growth_branches_and_hours(self):
        now = timezone.now()
        for username, branch in [("a", "CSE"), ("b", "CSE"), ("c", "ECE"), ("d", ""), ("e", None)]:
            make_user(username, branch=branch)
        User.objects.filter(username="a").update(date_joined=now - timedelta(days=2))
        User.objects.filter(username="e").update(date_joined=now - timedelta(days=45))

        data = services.get_analytics_data()

        self.assertEqual(
            data["branch_distribution"],
            [{"branch": "CSE", "count": 2}, {"branch": "ECE", "count": 1}],
        )
        self.assertEqual(sum(row["count"] for row in data["user_growth"]), 4)
        dates = [row["date"] for row in data["user_growth"]]
        self.assertEqual(dates, sorted(dates))
        self.assertEqual(sum(row["count"] for row in data["hourly_activity"]), 4)
        self.assertTrue(all(0 <= row["hour"] <= 23 for row in data["hourly_activity"]))
        self.assertEqual(data["stats"], {
            "total_users": 5,
            "recent_users": 4,
            "monthly_users": 4,
            "total_teams": 0,
            "recent_teams": 0,
        })


class AdminListTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_teams_with_members(self):
        build_team("Falcons", 3)

        rows = services.get_all_teams()

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["slug"], "falcons")
        self.assertEqual([m["role"] for m in rows[0]["members"]], ["leader", "member", "member"])

    def test_users_newest_first(self):
        make_user("older")
        User.objects.filter(username="older").update(date_joined=timezone.now() - timedelta(days=1))
        make_user("newer")

        self.assertEqual([u["email"] for u in services.get_all_users()], ["newer@example.com", "older@example.com"])


class DashboardApiTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.admin = make_user("admin", role="admin")
        self.moderator = make_user("mod", role="moderator")
        self.user = make_user("user")

    def test_staff_only(self):
        for url in ("/api/dashboard/stats/", "/api/dashboard/analytics/",
                    "/api/dashboard/users/", "/api/dashboard/teams/"):
            self.client.force_authenticate(user=self.user)
            self.assertEqual(self.client.get(url).status_code, 403, url)

            self.client.force_authenticate(user=self.moderator)
            self.assertEqual(self.client.get(url).status_code, 200, url)

    def test_stats_payload(self):
        self.client.force_authenticate(user=self.admin)

        resp = self.client.get("/api/dashboard/stats/")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["total_users"], 3)

    def test_anonymous_rejected(self):
        resp = self.client.get("/api/dashboard/stats/")
        self.assertIn(resp.status_code, (401, 403))
