# fest-backend/hackaway/services.py
"""
HackAway registration.

Each of the 12 problem statements has a participant cap. The count
check and the insert that fills a seat run in one transaction:

  1. the registering team's row is locked (membership changes and a
     second registration by a teammate wait behind it)
  2. on Postgres, a transaction-scoped advisory lock keyed by the track
     number serializes every check+insert on that track
  3. the new row claims the lowest free seat number in 1..max, and the
     unique (problem_statement_no, slot) constraint rejects any caller
     that saw the same state without holding the lock

A caller that loses at step 3 is retried once by service_operation and
then finds the track full.
"""
import logging

from django.conf import settings
from django.db import connection
from django.db.models import Count

from core.errors import ErrorKind, OperationError, require_admin, require_user, service_operation
from teams.models import Team, TeamMembership
from .constants import CAPACITY_LOCK_NAMESPACE, DEFAULTS_BY_ID, DEFAULT_PROBLEM_STATEMENTS
from .models import HackawayRegistration, ProblemStatementSetting

logger = logging.getLogger("fest.hackaway")


def _size_bounds():
    return (
        getattr(settings, "HACKAWAY_MIN_TEAM_SIZE", 2),
        getattr(settings, "HACKAWAY_MAX_TEAM_SIZE", 4),
    )


def _merge(default, override):
    """Override title only when non-empty; max and active flag when set."""
    if override is None:
        return {
            "id": default["id"],
            "title": default["title"],
            "max_participants": default["max_participants"],
            "is_active": True,
        }
    return {
        "id": default["id"],
        "title": override.title or default["title"],
        "max_participants": (
            override.max_participants
            if override.max_participants is not None
            else default["max_participants"]
        ),
        "is_active": override.is_active if override.is_active is not None else True,
    }


def get_problem_statement_settings():
    """All 12 problem statements, defaults left-joined with admin overrides."""
    overrides = {s.id: s for s in ProblemStatementSetting.objects.all()}
    return [_merge(ps, overrides.get(ps["id"])) for ps in DEFAULT_PROBLEM_STATEMENTS]


def get_problem_statement(problem_statement_no):
    default = DEFAULTS_BY_ID.get(problem_statement_no)
    if default is None:
        return None
    override = ProblemStatementSetting.objects.filter(pk=problem_statement_no).first()
    return _merge(default, override)


def _parse_problem_statement_no(value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise OperationError(ErrorKind.INVALID_INPUT, "Invalid problem statement selected.")
    if number not in DEFAULTS_BY_ID:
        raise OperationError(ErrorKind.NOT_FOUND, "Invalid problem statement selected.")
    return number


def _lock_track(problem_statement_no):
    """
    Serialize capacity decisions for one track until the transaction
    ends. Other backends rely on the seat constraint alone.
    """
    if connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        cursor.execute(
            "SELECT pg_advisory_xact_lock(%s, %s)",
            [CAPACITY_LOCK_NAMESPACE, problem_statement_no],
        )


def _free_slot(problem_statement_no, max_participants):
    taken = set(
        HackawayRegistration.objects
        .filter(problem_statement_no=problem_statement_no, slot__lte=max_participants)
        .values_list("slot", flat=True)
    )
    for slot in range(1, max_participants + 1):
        if slot not in taken:
            return slot
    return None


def _members_of(team):
    return [
        {"name": m.user.display_name, "email": m.user.email}
        for m in (
            TeamMembership.objects
            .filter(team=team)
            .select_related("user")
            .order_by("joined_at")
        )
    ]


def _full_message(problem_statement):
    return (
        f'Maximum participants ({problem_statement["max_participants"]}) reached for '
        f'"{problem_statement["title"]}". Please select a different problem statement.'
    )


@service_operation
def register_for_hackaway(user, problem_statement_no):
    require_user(user)

    membership = TeamMembership.objects.filter(user=user).first()
    if membership is None:
        raise OperationError(
            ErrorKind.NOT_IN_TEAM,
            "You must join or create a team to register for HackAway.",
        )

    team = Team.objects.select_for_update().filter(pk=membership.team_id).first()
    if team is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Team not found.")

    existing = HackawayRegistration.objects.filter(team=team).first()
    if existing:
        raise OperationError(
            ErrorKind.ALREADY_REGISTERED,
            "Your team is already registered for HackAway.",
            problem_statement_no=existing.problem_statement_no,
        )

    number = _parse_problem_statement_no(problem_statement_no)

    _lock_track(number)

    problem_statement = get_problem_statement(number)
    if not problem_statement["is_active"]:
        raise OperationError(
            ErrorKind.PROBLEM_STATEMENT_INACTIVE,
            "This problem statement is not available for registration.",
        )

    members = _members_of(team)
    min_size, max_size = _size_bounds()
    if len(members) < min_size:
        raise OperationError(
            ErrorKind.TEAM_TOO_SMALL,
            f"Your team must have at least {min_size} members to register for HackAway. "
            f"Please add more members to your team.",
        )
    if len(members) > max_size:
        raise OperationError(
            ErrorKind.TEAM_TOO_LARGE,
            f"Your team has more than {max_size} members. HackAway teams can have a maximum "
            f"of {max_size} members. Please adjust your team size.",
        )

    limit = problem_statement["max_participants"]
    current = HackawayRegistration.objects.filter(problem_statement_no=number).count()
    if current >= limit:
        logger.warning(
            f"HackAway registration refused: track {number} full ({current}/{limit}), team={team.id}"
        )
        raise OperationError(ErrorKind.PROBLEM_STATEMENT_FULL, _full_message(problem_statement))

    slot = _free_slot(number, limit)
    if slot is None:
        raise OperationError(ErrorKind.PROBLEM_STATEMENT_FULL, _full_message(problem_statement))

    registration = HackawayRegistration.objects.create(
        team=team,
        problem_statement_no=number,
        slot=slot,
    )

    logger.info(
        f"HackAway registration created: team={team.id}, track={number}, "
        f"slot={slot}/{limit}, by={user.id}"
    )
    return {
        "message": "Successfully registered for HackAway!",
        "registration_id": registration.id,
        "team_name": team.name,
        "team_members": members,
        "problem_statement_no": number,
    }


def check_registration(user):
    """What the HackAway page needs to know about the caller."""
    membership = (
        TeamMembership.objects
        .select_related("team")
        .filter(user=user)
        .first()
    )
    if membership is None:
        return {"is_registered": False, "no_team": True}

    team = membership.team
    registration = HackawayRegistration.objects.filter(team=team).first()
    return {
        "is_registered": registration is not None,
        "no_team": False,
        "team_id": team.id,
        "team_name": team.name,
        "team_members": _members_of(team),
        "problem_statement_no": registration.problem_statement_no if registration else None,
    }


def get_registration_stats():
    """{track: {"count", "max", "is_full"}} for every problem statement."""
    counts = dict(
        HackawayRegistration.objects
        .values("problem_statement_no")
        .annotate(n=Count("id"))
        .values_list("problem_statement_no", "n")
    )

    stats = {}
    for ps in get_problem_statement_settings():
        count = counts.get(ps["id"], 0)
        stats[ps["id"]] = {
            "count": count,
            "max": ps["max_participants"],
            # Lowering the cap never evicts, so count can exceed max
            "is_full": count >= ps["max_participants"],
        }
    return stats


# ─────────────────────────────────────────────────────────────
# Admin
# ─────────────────────────────────────────────────────────────

def _upsert_setting(number, **changes):
    default = DEFAULTS_BY_ID[number]
    setting, _ = ProblemStatementSetting.objects.select_for_update().get_or_create(
        pk=number,
        defaults={
            "title": default["title"],
            "max_participants": default["max_participants"],
        },
    )
    for field, value in changes.items():
        setattr(setting, field, value)
    setting.save()
    return setting


@service_operation
def set_max_participants(admin, problem_statement_no, new_max):
    """
    Change a track's cap. Registrations above a lowered cap stay; the
    track just reads as full until enough teams drop out.
    """
    require_admin(admin)

    number = _parse_problem_statement_no(problem_statement_no)

    upper = getattr(settings, "PROBLEM_STATEMENT_MAX_PARTICIPANTS_LIMIT", 100)
    try:
        new_max = int(new_max)
    except (TypeError, ValueError):
        raise OperationError(ErrorKind.INVALID_INPUT, f"Max participants must be between 1 and {upper}.")
    if not 1 <= new_max <= upper:
        raise OperationError(ErrorKind.INVALID_INPUT, f"Max participants must be between 1 and {upper}.")

    # Wait for in-flight registrations on this track to finish
    _lock_track(number)

    setting = _upsert_setting(number, max_participants=new_max)
    registered = HackawayRegistration.objects.filter(problem_statement_no=number).count()

    logger.info(
        f"HackAway capacity changed: track={number}, max={new_max}, "
        f"registered={registered}, by={admin.id}"
    )
    return {
        "message": f"Max participants updated for {setting.title}",
        "problem_statement_no": number,
        "max_participants": new_max,
        "registered": registered,
        "is_full": registered >= new_max,
    }


@service_operation
def set_problem_statement_active(admin, problem_statement_no, is_active):
    require_admin(admin)

    number = _parse_problem_statement_no(problem_statement_no)
    _lock_track(number)
    _upsert_setting(number, is_active=bool(is_active))

    logger.info(f"HackAway track {'opened' if is_active else 'closed'}: track={number}, by={admin.id}")
    return {"problem_statement_no": number, "is_active": bool(is_active)}


@service_operation
def update_hackaway_registration(admin, registration_id, **fields):
    """Judging fields only: rank, is_qualified, ppt_link."""
    require_admin(admin)

    registration = HackawayRegistration.objects.select_for_update().filter(pk=registration_id).first()
    if registration is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Registration not found.")

    allowed = {"rank", "is_qualified", "ppt_link"}
    unknown = set(fields) - allowed
    if unknown:
        raise OperationError(ErrorKind.INVALID_INPUT, f"Cannot update: {', '.join(sorted(unknown))}")

    for field, value in fields.items():
        setattr(registration, field, value)
    if fields:
        registration.save(update_fields=list(fields))

    return {
        "message": "Registration updated successfully",
        "registration_id": registration.id,
        "rank": registration.rank,
        "is_qualified": registration.is_qualified,
        "ppt_link": registration.ppt_link,
    }
