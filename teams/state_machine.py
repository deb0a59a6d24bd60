# fest-backend/teams/state_machine.py
"""
Join request state machine.

pending → accepted
        └→ rejected

Resolved requests are terminal; nothing goes back to pending.
"""
from typing import Tuple
import logging

from django.utils import timezone

from .models import JoinRequest

logger = logging.getLogger('fest.teams')


VALID_TRANSITIONS = {
    JoinRequest.STATUS_PENDING: [JoinRequest.STATUS_ACCEPTED, JoinRequest.STATUS_REJECTED],
    JoinRequest.STATUS_ACCEPTED: [],
    JoinRequest.STATUS_REJECTED: [],
}


def can_transition(request: JoinRequest, new_status: str) -> Tuple[bool, str]:
    """
    Check if a join request can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    if new_status not in dict(JoinRequest.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    allowed = VALID_TRANSITIONS.get(request.status, [])

    if new_status not in allowed:
        if is_terminal_status(request.status):
            return False, f"This request has already been {request.status}."
        return False, f"Cannot transition from '{request.status}' to '{new_status}'"

    return True, ""


def transition(request: JoinRequest, new_status: str, actor=None, save: bool = True) -> Tuple[bool, str]:
    """
    Attempt to move a join request to a new status, stamping resolved_at.

    Returns (success: bool, message: str)
    """
    can, reason = can_transition(request, new_status)

    if not can:
        logger.warning(
            f"Invalid join request transition attempted: request={request.id}, "
            f"from={request.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
            f"Reason: {reason}"
        )
        return False, reason

    old_status = request.status
    request.status = new_status
    request.resolved_at = timezone.now()

    if save:
        request.save(update_fields=['status', 'resolved_at'])

    logger.info(
        f"Join request transition: request={request.id}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )

    return True, f"Transitioned from '{old_status}' to '{new_status}'"


def is_terminal_status(status: str) -> bool:
    return not VALID_TRANSITIONS.get(status)
