# fest-backend/dashboard/services.py
"""
Read-side aggregates for the admin dashboard.

Everything here is a full scan, so results are cached through the
Django cache. Stale counts for up to an hour are acceptable; the lists
expire sooner because admins act on them.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db.models import Count
from django.db.models.functions import ExtractHour, TruncDate
from django.utils import timezone

from events.models import Event, EventRegistration
from hackaway.models import HackawayRegistration
from teams.models import JoinRequest, Team, TeamMembership

logger = logging.getLogger("fest.dashboard")

User = get_user_model()

STATS_CACHE_KEY = "dashboard:stats"
ANALYTICS_CACHE_KEY = "dashboard:analytics"
USERS_CACHE_KEY = "dashboard:users"
TEAMS_CACHE_KEY = "dashboard:teams"


def _stats_timeout():
    return getattr(settings, "DASHBOARD_STATS_CACHE_SECONDS", 3600)


def _lists_timeout():
    return getattr(settings, "DASHBOARD_LISTS_CACHE_SECONDS", 300)


def _compute_admin_stats():
    seven_days_ago = timezone.now() - timedelta(days=7)

    stats = {
        "total_users": User.objects.count(),
        "total_teams": Team.objects.count(),
        "total_members": TeamMembership.objects.count(),
        "pending_requests": JoinRequest.objects.filter(status=JoinRequest.STATUS_PENDING).count(),
        "recent_users": User.objects.filter(date_joined__gte=seven_days_ago).count(),
        "recent_teams": Team.objects.filter(created_at__gte=seven_days_ago).count(),
        "total_events": Event.objects.count(),
        "total_registrations": EventRegistration.objects.count(),
        "hackaway_registrations": HackawayRegistration.objects.count(),
    }
    logger.info(f"Dashboard stats recomputed: users={stats['total_users']}, teams={stats['total_teams']}")
    return stats


def get_admin_stats():
    return cache.get_or_set(STATS_CACHE_KEY, _compute_admin_stats, _stats_timeout())


def _compute_analytics():
    now = timezone.now()
    seven_days_ago = now - timedelta(days=7)
    thirty_days_ago = now - timedelta(days=30)

    growth = (
        User.objects
        .filter(date_joined__gte=thirty_days_ago)
        .annotate(day=TruncDate("date_joined"))
        .values("day")
        .annotate(count=Count("id"))
        .order_by("day")
    )
    user_growth = [{"date": row["day"].isoformat(), "count": row["count"]} for row in growth]

    branches = (
        User.objects
        .exclude(branch__isnull=True)
        .exclude(branch="")
        .values("branch")
        .annotate(count=Count("id"))
        .order_by("-count", "branch")
    )
    branch_distribution = [{"branch": row["branch"], "count": row["count"]} for row in branches]

    hours = (
        User.objects
        .filter(date_joined__gte=seven_days_ago)
        .annotate(hour=ExtractHour("date_joined"))
        .values("hour")
        .annotate(count=Count("id"))
        .order_by("hour")
    )
    hourly_activity = [{"hour": row["hour"], "count": row["count"]} for row in hours]

    return {
        "user_growth": user_growth,
        "branch_distribution": branch_distribution,
        "hourly_activity": hourly_activity,
        "stats": {
            "total_users": User.objects.count(),
            "recent_users": User.objects.filter(date_joined__gte=seven_days_ago).count(),
            "monthly_users": User.objects.filter(date_joined__gte=thirty_days_ago).count(),
            "total_teams": Team.objects.count(),
            "recent_teams": Team.objects.filter(created_at__gte=seven_days_ago).count(),
        },
    }


def get_analytics_data():
    return cache.get_or_set(ANALYTICS_CACHE_KEY, _compute_analytics, _stats_timeout())


def _compute_users():
    return [
        {
            "id": user.id,
            "name": user.display_name,
            "email": user.email,
            "role": user.role,
            "roll_no": user.roll_no,
            "branch": user.branch,
            "phone": user.phone,
            "date_joined": user.date_joined,
        }
        for user in User.objects.order_by("-date_joined")
    ]


def get_all_users():
    return cache.get_or_set(USERS_CACHE_KEY, _compute_users, _lists_timeout())


def _compute_teams():
    teams = Team.objects.prefetch_related("memberships__user").order_by("-created_at")
    rows = []
    for team in teams:
        members = sorted(team.memberships.all(), key=lambda m: (m.joined_at, m.id))
        rows.append({
            "id": team.id,
            "name": team.name,
            "slug": team.slug,
            "score": team.score,
            "created_at": team.created_at,
            "members": [
                {
                    "user_id": m.user_id,
                    "name": m.user.display_name,
                    "email": m.user.email,
                    "phone": m.user.phone,
                    "role": m.role,
                    "joined_at": m.joined_at,
                }
                for m in members
            ],
        })
    return rows


def get_all_teams():
    return cache.get_or_set(TEAMS_CACHE_KEY, _compute_teams, _lists_timeout())


def invalidate_dashboard_cache():
    cache.delete_many([STATS_CACHE_KEY, ANALYTICS_CACHE_KEY, USERS_CACHE_KEY, TEAMS_CACHE_KEY])
