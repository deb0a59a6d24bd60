# fest-backend/core/testing.py
"""Helpers shared by the test suites."""
import threading

from django.contrib.auth import get_user_model
from django.db import connection

from teams.models import Team, TeamMembership

User = get_user_model()


def make_user(username, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="pass1234",
        **extra,
    )


def build_team(name, size, slug=None):
    """A team of `size` members straight through the ORM; the first is leader."""
    key = slug or name.lower().replace(" ", "-")
    leader = make_user(f"{key}-1")
    team = Team.objects.create(name=name, slug=key, leader=leader)
    TeamMembership.objects.create(team=team, user=leader, role=TeamMembership.ROLE_LEADER)
    for i in range(2, size + 1):
        TeamMembership.objects.create(team=team, user=make_user(f"{key}-{i}"))
    return team


def run_concurrently(calls):
    """
    Start every call at once on its own thread and DB connection.
    An exception escaping any call is re-raised here once all threads finish.
    """
    barrier = threading.Barrier(len(calls))
    results = [None] * len(calls)
    errors = []

    def worker(index, fn):
        try:
            barrier.wait()
            results[index] = fn()
        except Exception as exc:
            errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i, fn)) for i, fn in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    if errors:
        raise errors[0]
    return results


def supports_concurrent_writers():
    """Postgres, or SQLite with a file-backed test database."""
    if connection.vendor == "postgresql":
        return True
    if connection.vendor == "sqlite":
        test_name = connection.settings_dict.get("TEST", {}).get("NAME")
        return bool(test_name) and ":memory:" not in str(test_name) and "mode=memory" not in str(test_name)
    return False
