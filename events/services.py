# fest-backend/events/services.py
"""
Team registration for regular festival events.

Events have no capacity limit; the only rule is one registration per
(event, team), and asking twice is answered with the existing entry.
"""
import logging

from core.errors import ErrorKind, OperationError, require_admin, require_user, service_operation
from teams.models import TeamMembership
from .models import Event, EventRegistration

logger = logging.getLogger("fest.events")


def _team_id_for(user):
    return (
        TeamMembership.objects
        .filter(user=user)
        .values_list("team_id", flat=True)
        .first()
    )


def _caller_team_id(user, message):
    team_id = _team_id_for(user)
    if team_id is None:
        raise OperationError(ErrorKind.NOT_IN_TEAM, message)
    return team_id


@service_operation
def register_for_event(user, event_slug):
    require_user(user)

    team_id = _caller_team_id(user, "You must join or create a team to register for events.")

    event = Event.objects.filter(slug=event_slug).first()
    if event is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Event not found.")

    existing = EventRegistration.objects.filter(event=event, team_id=team_id).first()
    if existing:
        return {
            "message": "Your team is already registered for this event.",
            "already_registered": True,
            "registration_id": existing.id,
            "event_slug": event.slug,
        }

    # A racing duplicate trips unique_together; the retry lands in the branch above
    registration = EventRegistration.objects.create(event=event, team_id=team_id)

    logger.info(f"Event registration created: event={event.id}, team={team_id}, by={user.id}")
    return {
        "message": "Successfully registered!",
        "already_registered": False,
        "registration_id": registration.id,
        "event_slug": event.slug,
    }


def get_user_event_registrations(user):
    """Slugs of the events the caller's team is registered for."""
    team_id = _team_id_for(user)
    if team_id is None:
        return []

    return list(
        EventRegistration.objects
        .filter(team_id=team_id)
        .values_list("event__slug", flat=True)
    )


def list_active_events():
    return Event.objects.filter(is_active=True).order_by("start_time", "name")


# ─────────────────────────────────────────────────────────────
# Admin
# ─────────────────────────────────────────────────────────────

@service_operation
def create_event(admin, data):
    """`data` is EventFormSerializer.validated_data."""
    require_admin(admin)

    if Event.objects.filter(slug=data["slug"]).exists():
        raise OperationError(ErrorKind.INVALID_INPUT, "An event with this slug already exists.")

    event = Event.objects.create(**data)

    logger.info(f"Event created: event={event.id}, slug={event.slug}, by={admin.id}")
    return {"message": "Event created", "event_id": event.id, "slug": event.slug}


@service_operation
def update_event(admin, event_id, data):
    require_admin(admin)

    event = Event.objects.select_for_update().filter(pk=event_id).first()
    if event is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Event not found.")

    new_slug = data.get("slug")
    if new_slug and Event.objects.filter(slug=new_slug).exclude(pk=event.pk).exists():
        raise OperationError(ErrorKind.INVALID_INPUT, "An event with this slug already exists.")

    for field, value in data.items():
        setattr(event, field, value)
    event.save()

    logger.info(f"Event updated: event={event.id}, fields={sorted(data)}, by={admin.id}")
    return {"message": "Event updated", "event_id": event.id, "slug": event.slug}


@service_operation
def delete_event(admin, event_id):
    require_admin(admin)

    deleted, _ = Event.objects.filter(pk=event_id).delete()
    if not deleted:
        raise OperationError(ErrorKind.NOT_FOUND, "Event not found.")

    logger.info(f"Event deleted: event={event_id}, by={admin.id}")
    return {"message": "Event deleted", "event_id": event_id}


@service_operation
def update_event_registration(admin, registration_id, score=None, rank=None):
    """Record a team's judged score and/or final rank."""
    require_admin(admin)

    registration = (
        EventRegistration.objects
        .select_for_update()
        .select_related("event")
        .filter(pk=registration_id)
        .first()
    )
    if registration is None:
        raise OperationError(ErrorKind.NOT_FOUND, "Registration not found.")

    if score is not None and not 0 <= score <= registration.event.max_score:
        raise OperationError(
            ErrorKind.INVALID_INPUT,
            f"Score must be between 0 and {registration.event.max_score}.",
        )

    update_fields = []
    if score is not None:
        registration.score = score
        update_fields.append("score")
    if rank is not None:
        registration.rank = rank
        update_fields.append("rank")

    if update_fields:
        registration.save(update_fields=update_fields)

    return {
        "registration_id": registration.id,
        "score": registration.score,
        "rank": registration.rank,
    }
