# dashboard/views.py

from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsFestStaff
from . import services


class AdminStatsView(APIView):
    permission_classes = [IsFestStaff]

    def get(self, request):
        return Response(services.get_admin_stats())


class AnalyticsView(APIView):
    permission_classes = [IsFestStaff]

    def get(self, request):
        return Response(services.get_analytics_data())


class AdminUserListView(APIView):
    permission_classes = [IsFestStaff]

    def get(self, request):
        return Response(services.get_all_users())


class AdminTeamListView(APIView):
    permission_classes = [IsFestStaff]

    def get(self, request):
        return Response(services.get_all_teams())


class RefreshDashboardView(APIView):
    """Drop cached aggregates so the next read recomputes them."""
    permission_classes = [IsFestStaff]

    def post(self, request):
        services.invalidate_dashboard_cache()
        return Response({"ok": True, "message": "Dashboard cache cleared"})
