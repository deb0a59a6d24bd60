# fest-backend/core/views.py
import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connections
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger("fest")


def _database_ok():
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.exception("Health check: database unreachable")
        return False
    return True


def _cache_ok():
    cache.set("health:ping", "pong", 5)
    return cache.get("health:ping") == "pong"


class HealthCheckView(APIView):
    """
    Uptime check. Reports database and cache reachability plus the
    time both checks took; answers 503 when the database is down.
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint

    def get(self, request, *args, **kwargs):
        start = time.time()
        db_ok = _database_ok()
        cache_ok = _cache_ok()
        duration_ms = int((time.time() - start) * 1000)

        return Response(
            {
                "status": "ok" if db_ok and cache_ok else "degraded",
                "db": db_ok,
                "cache": cache_ok,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": duration_ms,
            },
            status=200 if db_ok else 503,
        )
