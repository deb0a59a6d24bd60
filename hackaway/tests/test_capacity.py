# hackaway/tests/test_capacity.py

import unittest
from unittest import mock

from django.test import TestCase, TransactionTestCase

from core.errors import ErrorKind
from core.testing import build_team, make_user, run_concurrently, supports_concurrent_writers
from hackaway import services
from hackaway.models import HackawayRegistration, ProblemStatementSetting
from teams.models import TeamMembership


def leader_of(team):
    return TeamMembership.objects.get(team=team, role=TeamMembership.ROLE_LEADER).user


class CapacityGateTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", role="admin")
        services.set_max_participants(self.admin, 3, 5)

    def test_twenty_callers_five_seats(self):
        teams = [build_team(f"Team {i:02d}", 2) for i in range(20)]

        results = [services.register_for_hackaway(leader_of(team), 3) for team in teams]

        self.assertEqual(sum(1 for r in results if r.ok), 5)
        failures = [r for r in results if not r.ok]
        self.assertEqual(len(failures), 15)
        self.assertTrue(all(r.kind == ErrorKind.PROBLEM_STATEMENT_FULL for r in failures))
        self.assertEqual(HackawayRegistration.objects.filter(problem_statement_no=3).count(), 5)
        self.assertEqual(
            sorted(HackawayRegistration.objects.values_list("slot", flat=True)),
            [1, 2, 3, 4, 5],
        )

    def test_full_message_names_the_track(self):
        services.set_max_participants(self.admin, 4, 1)
        services.register_for_hackaway(leader_of(build_team("First", 2)), 4)

        result = services.register_for_hackaway(leader_of(build_team("Second", 2)), 4)

        self.assertEqual(result.kind, ErrorKind.PROBLEM_STATEMENT_FULL)
        self.assertEqual(
            result.message,
            'Maximum participants (1) reached for "Glove-Controlled Drift Racer: Master Every Move!". '
            'Please select a different problem statement.',
        )

    def test_lost_race_is_retried_and_takes_next_seat(self):
        services.register_for_hackaway(leader_of(build_team("Early", 2)), 3)
        real_free_slot = services._free_slot
        calls = []

        def stale_view(problem_statement_no, max_participants):
            calls.append(problem_statement_no)
            # First attempt behaves like a racer that read before seat 1 was taken
            if len(calls) == 1:
                return 1
            return real_free_slot(problem_statement_no, max_participants)

        with mock.patch("hackaway.services._free_slot", side_effect=stale_view):
            result = services.register_for_hackaway(leader_of(build_team("Late", 2)), 3)

        self.assertTrue(result.ok)
        self.assertEqual(len(calls), 2)
        self.assertEqual(
            HackawayRegistration.objects.get(pk=result["registration_id"]).slot, 2
        )

    def test_lost_race_twice_is_transient_conflict(self):
        services.register_for_hackaway(leader_of(build_team("Early", 2)), 3)
        late = build_team("Late", 2)

        with mock.patch("hackaway.services._free_slot", return_value=1):
            result = services.register_for_hackaway(leader_of(late), 3)

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.TRANSIENT_STORE_CONFLICT)
        self.assertFalse(HackawayRegistration.objects.filter(team=late).exists())


class OvershootTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", role="admin")
        self.registered = [build_team(f"Crew {i}", 2) for i in range(3)]
        for team in self.registered:
            self.assertTrue(services.register_for_hackaway(leader_of(team), 6).ok)

    def test_lowering_cap_keeps_registrations_and_reads_full(self):
        result = services.set_max_participants(self.admin, 6, 2)

        self.assertTrue(result.ok)
        self.assertTrue(result["is_full"])
        self.assertEqual(HackawayRegistration.objects.filter(problem_statement_no=6).count(), 3)

        stats = services.get_registration_stats()[6]
        self.assertEqual(stats, {"count": 3, "max": 2, "is_full": True})

        newcomer = build_team("Newcomer", 3)
        result = services.register_for_hackaway(leader_of(newcomer), 6)
        self.assertEqual(result.kind, ErrorKind.PROBLEM_STATEMENT_FULL)

    def test_raising_cap_again_reopens_track(self):
        services.set_max_participants(self.admin, 6, 2)
        services.set_max_participants(self.admin, 6, 4)

        result = services.register_for_hackaway(leader_of(build_team("Newcomer", 2)), 6)

        self.assertTrue(result.ok)
        self.assertEqual(services.get_registration_stats()[6]["count"], 4)

    def test_seat_freed_by_deleted_team(self):
        from teams import services as team_services

        services.set_max_participants(self.admin, 6, 3)
        gone = self.registered[0]
        team_services.delete_team(leader_of(gone), gone.id)

        result = services.register_for_hackaway(leader_of(build_team("Newcomer", 2)), 6)
        self.assertTrue(result.ok)


class MaxParticipantsAdminTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", role="admin")
        self.user = make_user("user")

    def test_upsert_creates_override_row(self):
        self.assertFalse(ProblemStatementSetting.objects.exists())

        result = services.set_max_participants(self.admin, 9, 25)

        self.assertTrue(result.ok)
        setting = ProblemStatementSetting.objects.get(pk=9)
        self.assertEqual(setting.max_participants, 25)
        self.assertEqual(setting.title, "Agentic AI for Intelligent Personal Financial Decision-Making")

        services.set_max_participants(self.admin, 9, 30)
        self.assertEqual(ProblemStatementSetting.objects.get(pk=9).max_participants, 30)
        self.assertEqual(ProblemStatementSetting.objects.count(), 1)

    def test_bounds(self):
        for bad in (0, 101, -3, "many"):
            result = services.set_max_participants(self.admin, 1, bad)
            self.assertEqual(result.kind, ErrorKind.INVALID_INPUT, bad)

        self.assertTrue(services.set_max_participants(self.admin, 1, 1).ok)
        self.assertTrue(services.set_max_participants(self.admin, 1, 100).ok)

    def test_unknown_problem_statement(self):
        result = services.set_max_participants(self.admin, 13, 5)
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)

        result = services.set_problem_statement_active(self.admin, 0, False)
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertFalse(ProblemStatementSetting.objects.exists())

    def test_requires_admin(self):
        result = services.set_max_participants(self.user, 1, 5)
        self.assertEqual(result.kind, ErrorKind.UNAUTHORIZED)
        self.assertFalse(ProblemStatementSetting.objects.exists())

    def test_settings_merge_defaults_with_overrides(self):
        services.set_max_participants(self.admin, 2, 4)
        services.set_problem_statement_active(self.admin, 5, False)

        merged = {ps["id"]: ps for ps in services.get_problem_statement_settings()}

        self.assertEqual(len(merged), 12)
        self.assertEqual(merged[2]["max_participants"], 4)
        self.assertTrue(merged[2]["is_active"])
        self.assertFalse(merged[5]["is_active"])
        self.assertEqual(merged[5]["max_participants"], 10)
        self.assertEqual(merged[1], {
            "id": 1,
            "title": "The Reviewer Who Never Sleeps",
            "max_participants": 10,
            "is_active": True,
        })


@unittest.skipUnless(supports_concurrent_writers(), "needs a database that threads can share")
class ConcurrentCapacityTests(TransactionTestCase):

    def test_twenty_concurrent_callers_five_seats(self):
        admin = make_user("admin", role="admin")
        services.set_max_participants(admin, 7, 5)
        leaders = [leader_of(build_team(f"Racer {i:02d}", 2)) for i in range(20)]

        results = run_concurrently([
            (lambda user=user: services.register_for_hackaway(user, 7)) for user in leaders
        ])

        self.assertEqual(sum(1 for r in results if r.ok), 5)
        self.assertEqual(
            sum(1 for r in results if r.kind == ErrorKind.PROBLEM_STATEMENT_FULL), 15
        )
        self.assertEqual(HackawayRegistration.objects.filter(problem_statement_no=7).count(), 5)

    def test_teammates_racing_register_once(self):
        team = build_team("Twins", 4)
        members = [m.user for m in TeamMembership.objects.filter(team=team)]

        results = run_concurrently([
            (lambda user=user: services.register_for_hackaway(user, 1)) for user in members
        ])

        self.assertEqual(sum(1 for r in results if r.ok), 1)
        self.assertTrue(all(r.kind == ErrorKind.ALREADY_REGISTERED for r in results if not r.ok))
        self.assertEqual(HackawayRegistration.objects.filter(team=team).count(), 1)
