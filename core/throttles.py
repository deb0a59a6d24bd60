# fest-backend/core/throttles.py

from rest_framework.throttling import ScopedRateThrottle


class UserWriteThrottle(ScopedRateThrottle):
    """
    Scoped throttle that only counts writes, keyed by user.

    Views set `throttle_scope`; rates live in REST_FRAMEWORK's
    DEFAULT_THROTTLE_RATES. Cache key shape:
      throttle_<scope>_u<user_id>
    """

    def get_cache_key(self, request, view):
        # Reads are never throttled
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return None

        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return None

        return f"throttle_{self.scope}_u{user.id}"
