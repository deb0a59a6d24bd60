# fest-backend/teams/services.py
"""
Team membership rules.

Every user belongs to at most one team. The rule is checked up front
for a friendly error and enforced by the store at commit
(TeamMembership.user is unique), so two requests racing past the
check cannot both land.
"""
import logging
import secrets
import string

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone
from django.utils.text import slugify

from core.errors import ErrorKind, OperationError, require_admin, require_user, service_operation
from .models import JoinRequest, Team, TeamMembership
from .state_machine import transition

logger = logging.getLogger("fest.teams")

SLUG_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SLUG_SUFFIX_LENGTH = 6


def max_team_size() -> int:
    return getattr(settings, "TEAM_MAX_SIZE", 4)


def random_slug_suffix() -> str:
    return "".join(secrets.choice(SLUG_SUFFIX_ALPHABET) for _ in range(SLUG_SUFFIX_LENGTH))


def build_team_slug(name: str) -> str:
    """'Falcons' -> 'falcons-x7y2z9'"""
    base = slugify(name)[:50].strip("-") or "team"
    return f"{base}-{random_slug_suffix()}"


def _parse_id(value, label):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise OperationError(ErrorKind.INVALID_INPUT, f"Invalid {label} id")


def _lock_team_if_exists(team_id):
    return Team.objects.select_for_update().filter(pk=team_id).first()


def _lock_team(team_id) -> Team:
    team = _lock_team_if_exists(_parse_id(team_id, "team"))
    if team is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Team not found.")
    return team


def _insert_team(name: str, leader) -> Team:
    """
    Insert the team row, drawing a fresh slug suffix whenever the slug
    collides with an existing team.
    """
    attempts = getattr(settings, "TEAM_SLUG_ATTEMPTS", 5)

    for attempt in range(1, attempts + 1):
        slug = build_team_slug(name)
        try:
            with transaction.atomic():
                return Team.objects.create(name=name, slug=slug, leader=leader)
        except IntegrityError:
            logger.warning(f"Team slug collision on '{slug}' (attempt {attempt}/{attempts})")

    raise OperationError(
        ErrorKind.TRANSIENT_STORE_CONFLICT,
        "Could not generate a unique team code. Please try again.",
    )


# ─────────────────────────────────────────────────────────────
# Team lifecycle
# ─────────────────────────────────────────────────────────────

@service_operation
def create_team(user, name):
    require_user(user)

    name = (name or "").strip()
    if not name:
        raise OperationError(ErrorKind.INVALID_INPUT, "Team name is required")
    if len(name) > 100:
        raise OperationError(ErrorKind.INVALID_INPUT, "Team name must be at most 100 characters")

    if TeamMembership.objects.filter(user=user).exists():
        raise OperationError(
            ErrorKind.ALREADY_IN_TEAM,
            "You are already in a team, cannot create a new one",
        )

    team = _insert_team(name, user)
    TeamMembership.objects.create(team=team, user=user, role=TeamMembership.ROLE_LEADER)

    logger.info(f"Team created: team={team.id}, slug={team.slug}, leader={user.id}")
    return {"message": "Team created successfully!", "slug": team.slug, "team_id": team.id}


@service_operation
def delete_team(leader, team_id):
    """
    Leader-only. Join requests, memberships and the team row go in one
    transaction; the team's event and HackAway registrations cascade
    with the team row.
    """
    require_user(leader)

    team = _lock_team(team_id)
    if team.leader_id != leader.id:
        raise OperationError(ErrorKind.UNAUTHORIZED, "Only the team leader can delete the team")
    team_id = team.id

    requests_deleted, _ = JoinRequest.objects.filter(team=team).delete()
    members_deleted, _ = TeamMembership.objects.filter(team=team).delete()
    team.delete()

    logger.info(
        f"Team deleted: team={team_id}, leader={leader.id}, "
        f"memberships={members_deleted}, join_requests={requests_deleted}"
    )
    return {"message": "Team deleted successfully", "team_id": team_id}


@service_operation
def leave_team(user):
    require_user(user)

    membership = TeamMembership.objects.filter(user=user).first()
    if membership is None:
        raise OperationError(ErrorKind.NOT_IN_TEAM, "You are not in a team")

    if membership.is_leader:
        raise OperationError(
            ErrorKind.IS_LEADER,
            "Team leaders cannot leave. Delete the team instead.",
        )

    # The leader may have removed this member or deleted the team meanwhile
    team = _lock_team_if_exists(membership.team_id)
    if team is None or not TeamMembership.objects.filter(pk=membership.pk, team=team).exists():
        raise OperationError(ErrorKind.NOT_IN_TEAM, "You are not in a team")

    membership.delete()

    logger.info(f"Member left team: team={team.id}, user={user.id}")
    return {"message": "You have left the team", "team_id": team.id}


@service_operation
def remove_member(leader, member_id):
    require_user(leader)

    member_id = _parse_id(member_id, "member")

    leader_membership = TeamMembership.objects.filter(user=leader).first()
    if leader_membership is None or not leader_membership.is_leader:
        raise OperationError(ErrorKind.UNAUTHORIZED, "Only the team leader can remove members")

    team = _lock_team(leader_membership.team_id)

    if member_id == leader.id:
        raise OperationError(
            ErrorKind.CANNOT_REMOVE_LEADER,
            "The team leader cannot be removed. Delete the team instead.",
        )

    membership = TeamMembership.objects.filter(team=team, user_id=member_id).first()
    if membership is None:
        raise OperationError(ErrorKind.NOT_A_MEMBER, "This user is not a member of your team")

    membership.delete()

    logger.info(f"Member removed: team={team.id}, user={member_id}, by={leader.id}")
    return {"message": "Member removed from team", "team_id": team.id, "user_id": member_id}


# ─────────────────────────────────────────────────────────────
# Join requests
# ─────────────────────────────────────────────────────────────

@service_operation
def request_join(user, slug):
    require_user(user)

    slug = (slug or "").strip()
    if not slug:
        raise OperationError(ErrorKind.INVALID_INPUT, "Team code is required")

    team = Team.objects.filter(slug=slug).first()
    if team is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Team not found with this code")

    if TeamMembership.objects.filter(user=user).exists():
        raise OperationError(ErrorKind.ALREADY_IN_TEAM, "You are already in a team")

    if JoinRequest.objects.filter(team=team, user=user, status=JoinRequest.STATUS_PENDING).exists():
        raise OperationError(
            ErrorKind.DUPLICATE_REQUEST,
            "You already have a pending request for this team",
        )

    join_request = JoinRequest.objects.create(team=team, user=user)

    logger.info(f"Join request filed: request={join_request.id}, team={team.id}, user={user.id}")
    return {
        "message": f"Request sent to join team: {team.name}!",
        "request_id": join_request.id,
        "team_name": team.name,
    }


def _lock_request_for_leader(leader, request_id):
    """
    Lock the team before the request so every writer takes team rows
    first, then check the caller leads it.
    """
    request_id = _parse_id(request_id, "join request")
    team_id = JoinRequest.objects.filter(pk=request_id).values_list("team_id", flat=True).first()
    if team_id is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Join request not found")

    team = _lock_team(team_id)
    join_request = JoinRequest.objects.select_for_update().filter(pk=request_id).first()
    if join_request is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Join request not found")

    if team.leader_id != leader.id:
        raise OperationError(
            ErrorKind.UNAUTHORIZED,
            "Only the team leader can respond to join requests",
        )

    if join_request.status != JoinRequest.STATUS_PENDING:
        raise OperationError(
            ErrorKind.REQUEST_NOT_PENDING,
            f"This request has already been {join_request.status}.",
        )

    return team, join_request


@service_operation
def accept_join_request(leader, request_id):
    require_user(leader)

    team, join_request = _lock_request_for_leader(leader, request_id)

    team_size = TeamMembership.objects.filter(team=team).count()
    limit = max_team_size()
    if team_size >= limit:
        raise OperationError(ErrorKind.TEAM_FULL, f"Team is full (maximum {limit} members).")

    # Time may have passed since the request was filed
    if TeamMembership.objects.filter(user_id=join_request.user_id).exists():
        raise OperationError(ErrorKind.ALREADY_IN_TEAM, "This user has already joined a team.")

    ok, reason = transition(join_request, JoinRequest.STATUS_ACCEPTED, actor=leader)
    if not ok:
        raise OperationError(ErrorKind.REQUEST_NOT_PENDING, reason)

    TeamMembership.objects.create(
        team=team,
        user_id=join_request.user_id,
        role=TeamMembership.ROLE_MEMBER,
    )

    # The user is now in a team; their other open requests can never be accepted
    auto_rejected = (
        JoinRequest.objects
        .filter(user_id=join_request.user_id, status=JoinRequest.STATUS_PENDING)
        .exclude(pk=join_request.pk)
        .update(status=JoinRequest.STATUS_REJECTED, resolved_at=timezone.now())
    )

    logger.info(
        f"Join request accepted: request={join_request.id}, team={team.id}, "
        f"user={join_request.user_id}, size={team_size + 1}, auto_rejected={auto_rejected}"
    )
    return {
        "message": "Member added to team!",
        "team_id": team.id,
        "user_id": join_request.user_id,
        "team_size": team_size + 1,
        "auto_rejected_requests": auto_rejected,
    }


@service_operation
def reject_join_request(leader, request_id):
    require_user(leader)

    team, join_request = _lock_request_for_leader(leader, request_id)

    ok, reason = transition(join_request, JoinRequest.STATUS_REJECTED, actor=leader)
    if not ok:
        raise OperationError(ErrorKind.REQUEST_NOT_PENDING, reason)

    return {"message": "Request rejected", "team_id": team.id, "request_id": join_request.id}


# ─────────────────────────────────────────────────────────────
# Reads
# ─────────────────────────────────────────────────────────────

def get_user_team(user):
    """The caller's team, or None."""
    membership = TeamMembership.objects.select_related("team").filter(user=user).first()
    return membership.team if membership else None


def get_user_join_requests(user):
    return (
        JoinRequest.objects
        .filter(user=user)
        .select_related("team")
        .order_by("-created_at")
    )


def get_pending_requests_for_team(team):
    return (
        JoinRequest.objects
        .filter(team=team, status=JoinRequest.STATUS_PENDING)
        .select_related("user")
        .order_by("created_at")
    )


def get_team_by_slug(slug):
    return Team.objects.filter(slug=slug).first()


def get_leaderboard():
    """Teams by score, highest first, with 1-based rank."""
    teams = (
        Team.objects
        .annotate(member_count=Count("memberships"))
        .order_by("-score", "created_at")
    )
    return [
        {
            "rank": index,
            "id": team.id,
            "team_name": team.name,
            "slug": team.slug,
            "points": team.score,
            "members": team.member_count,
            "created_at": team.created_at,
        }
        for index, team in enumerate(teams, start=1)
    ]


@service_operation
def update_team_score(admin, team_id, score):
    require_admin(admin)

    try:
        score = int(score)
    except (TypeError, ValueError):
        raise OperationError(ErrorKind.INVALID_INPUT, "Score must be a whole number")

    team = _lock_team(team_id)
    team.score = score
    team.save(update_fields=["score"])

    logger.info(f"Team score updated: team={team.id}, score={score}, by={admin.id}")
    return {"team_id": team.id, "score": team.score}
