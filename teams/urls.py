# teams/urls.py

from django.urls import path
from .views import (
    AcceptJoinRequestView,
    CreateTeamView,
    JoinRequestCreateView,
    LeaderboardView,
    LeaveTeamView,
    MyJoinRequestsView,
    MyTeamView,
    RejectJoinRequestView,
    RemoveMemberView,
    TeamBySlugView,
    TeamDeleteView,
    TeamScoreView,
)

urlpatterns = [
    path('', CreateTeamView.as_view(), name='team-create'),
    path('me/', MyTeamView.as_view(), name='team-me'),
    path('leave/', LeaveTeamView.as_view(), name='team-leave'),
    path('leaderboard/', LeaderboardView.as_view(), name='team-leaderboard'),
    path('slug/<slug:slug>/', TeamBySlugView.as_view(), name='team-by-slug'),
    path('join-requests/', JoinRequestCreateView.as_view(), name='join-request-create'),
    path('join-requests/mine/', MyJoinRequestsView.as_view(), name='join-request-mine'),
    path('join-requests/<int:request_id>/accept/', AcceptJoinRequestView.as_view(), name='join-request-accept'),
    path('join-requests/<int:request_id>/reject/', RejectJoinRequestView.as_view(), name='join-request-reject'),
    path('members/<int:user_id>/', RemoveMemberView.as_view(), name='team-member-remove'),
    path('<int:team_id>/', TeamDeleteView.as_view(), name='team-delete'),
    path('<int:team_id>/score/', TeamScoreView.as_view(), name='team-score'),
]
