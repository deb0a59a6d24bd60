# hackaway/urls.py

from django.urls import path
from .views import (
    AdminProblemStatementView,
    AdminRegistrationListView,
    AdminRegistrationUpdateView,
    HackawayRegisterView,
    MyHackawayView,
    ProblemStatementListView,
)

urlpatterns = [
    path('problem-statements/', ProblemStatementListView.as_view(), name='hackaway-problem-statements'),
    path('register/', HackawayRegisterView.as_view(), name='hackaway-register'),
    path('me/', MyHackawayView.as_view(), name='hackaway-me'),
    path('admin/problem-statements/<int:problem_statement_no>/', AdminProblemStatementView.as_view(), name='hackaway-admin-problem-statement'),
    path('admin/registrations/', AdminRegistrationListView.as_view(), name='hackaway-admin-registrations'),
    path('admin/registrations/<int:registration_id>/', AdminRegistrationUpdateView.as_view(), name='hackaway-admin-registration-update'),
]
