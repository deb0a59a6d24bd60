# dashboard/urls.py

from django.urls import path

from .views import AdminStatsView, AdminTeamListView, AdminUserListView, AnalyticsView, RefreshDashboardView

urlpatterns = [
    path('stats/', AdminStatsView.as_view(), name='dashboard-stats'),
    path('analytics/', AnalyticsView.as_view(), name='dashboard-analytics'),
    path('users/', AdminUserListView.as_view(), name='dashboard-users'),
    path('teams/', AdminTeamListView.as_view(), name='dashboard-teams'),
    path('refresh/', RefreshDashboardView.as_view(), name='dashboard-refresh'),
]
