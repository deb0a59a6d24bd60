# fest-backend/core/errors.py
"""
Shared error taxonomy for the fest services.

Services raise OperationError internally and return a Result at the
module boundary:

    {"ok": true, ...data}
    {"ok": false, "kind": "<ErrorKind>", "message": "...", ...data}

Views turn a Result into an HTTP response with result_response().
"""
import functools
import logging

from django.db import DatabaseError, IntegrityError, OperationalError, transaction
from rest_framework import status
from rest_framework.response import Response

from core.permissions import is_admin

logger = logging.getLogger("fest")


class ErrorKind:
    UNAUTHENTICATED = "Unauthenticated"
    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "NotFound"
    ALREADY_IN_TEAM = "AlreadyInTeam"
    NOT_IN_TEAM = "NotInTeam"
    IS_LEADER = "IsLeader"
    CANNOT_REMOVE_LEADER = "CannotRemoveLeader"
    NOT_A_MEMBER = "NotAMember"
    DUPLICATE_REQUEST = "DuplicateRequest"
    REQUEST_NOT_PENDING = "RequestNotPending"
    TEAM_FULL = "TeamFull"
    TEAM_TOO_SMALL = "TeamTooSmall"
    TEAM_TOO_LARGE = "TeamTooLarge"
    PROBLEM_STATEMENT_FULL = "ProblemStatementFull"
    PROBLEM_STATEMENT_INACTIVE = "ProblemStatementInactive"
    ALREADY_REGISTERED = "AlreadyRegistered"
    INVALID_INPUT = "InvalidInput"
    TRANSIENT_STORE_CONFLICT = "TransientStoreConflict"
    RATE_LIMITED = "RateLimited"


# The caller's desired end-state already holds; the UI shows these as info.
INFORMATIONAL_KINDS = {
    ErrorKind.ALREADY_REGISTERED,
    ErrorKind.ALREADY_IN_TEAM,
}

HTTP_STATUS_FOR_KIND = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_IN_TEAM: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_IN_TEAM: status.HTTP_400_BAD_REQUEST,
    ErrorKind.IS_LEADER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CANNOT_REMOVE_LEADER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_A_MEMBER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_REQUEST: status.HTTP_409_CONFLICT,
    ErrorKind.REQUEST_NOT_PENDING: status.HTTP_409_CONFLICT,
    ErrorKind.TEAM_FULL: status.HTTP_409_CONFLICT,
    ErrorKind.TEAM_TOO_SMALL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TEAM_TOO_LARGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PROBLEM_STATEMENT_FULL: status.HTTP_409_CONFLICT,
    ErrorKind.PROBLEM_STATEMENT_INACTIVE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TRANSIENT_STORE_CONFLICT: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
}

# Postgres SQLSTATEs for serialization_failure and deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}

# SQLITE_BUSY and SQLITE_LOCKED surface only as message text
SQLITE_BUSY_MESSAGES = ("database is locked", "database table is locked")

MAX_ATTEMPTS = 2


class OperationError(Exception):
    """A precondition failed; carries the error kind shown to the user."""

    def __init__(self, kind, message, **data):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.data = data


class Result:
    """Discriminated outcome of a service operation."""

    def __init__(self, ok, kind=None, message="", data=None):
        self.ok = ok
        self.kind = kind
        self.message = message
        self.data = data or {}

    @classmethod
    def success(cls, message="", **data):
        return cls(True, message=message, data=data)

    @classmethod
    def fail(cls, kind, message, **data):
        return cls(False, kind=kind, message=message, data=data)

    @property
    def is_informational(self) -> bool:
        return self.kind in INFORMATIONAL_KINDS

    def to_dict(self) -> dict:
        payload = {"ok": self.ok}
        if self.message:
            payload["message"] = self.message
        if not self.ok:
            payload["kind"] = self.kind
            payload["severity"] = "info" if self.is_informational else "error"
        payload.update(self.data)
        return payload

    def __getitem__(self, key):
        return self.data[key]

    def __repr__(self):
        if self.ok:
            return f"<Result ok {self.data!r}>"
        return f"<Result {self.kind}: {self.message}>"


def is_lost_race(exc: DatabaseError) -> bool:
    """
    True if the store rejected a write because a concurrent transaction
    committed first (unique constraint, serialization failure, deadlock)
    or, on SQLite, still held the write lock when the busy timeout ran out.
    """
    if isinstance(exc, IntegrityError):
        return True
    if isinstance(exc, OperationalError):
        cause = exc.__cause__
        sqlstate = getattr(cause, "pgcode", None) or getattr(cause, "sqlstate", None)
        if sqlstate in RETRYABLE_SQLSTATES:
            return True
        return any(marker in str(exc) for marker in SQLITE_BUSY_MESSAGES)
    return False


def service_operation(func):
    """
    Run a service body as one atomic unit and return a Result.

    The body returns a dict (optionally with a "message" key) on success
    and raises OperationError on a failed precondition. Any write made
    before the failure is rolled back. A lost race is retried once with
    every check re-evaluated; a second loss surfaces as
    TransientStoreConflict.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                with transaction.atomic():
                    data = func(*args, **kwargs) or {}
            except OperationError as exc:
                return Result.fail(exc.kind, exc.message, **exc.data)
            except DatabaseError as exc:
                if not is_lost_race(exc):
                    raise
                logger.warning(
                    f"{func.__name__}: lost a race to a concurrent commit "
                    f"(attempt {attempt}/{MAX_ATTEMPTS}): {exc}"
                )
                continue

            message = data.pop("message", "")
            return Result.success(message, **data)

        return Result.fail(
            ErrorKind.TRANSIENT_STORE_CONFLICT,
            "Another request changed this data at the same time. Please try again.",
        )

    return wrapper


def require_user(user):
    if user is None or not getattr(user, "is_authenticated", False):
        raise OperationError(ErrorKind.UNAUTHENTICATED, "You must be logged in.")
    return user


def require_admin(user):
    require_user(user)
    if not is_admin(user):
        raise OperationError(
            ErrorKind.UNAUTHORIZED,
            f"Access denied. Required role: admin. Current role: {getattr(user, 'role', None)}",
        )
    return user


def result_response(result: Result, success_status=status.HTTP_200_OK):
    """Small helper so every view answers with the same envelope."""
    if result.ok:
        return Response(result.to_dict(), status=success_status)
    return Response(
        result.to_dict(),
        status=HTTP_STATUS_FOR_KIND.get(result.kind, status.HTTP_400_BAD_REQUEST),
    )
