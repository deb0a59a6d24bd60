# users/urls.py

from django.urls import path
from .views import MeView, UserRoleUpdateView

urlpatterns = [
    path('me/', MeView.as_view(), name='user-me'),
    path('role/', UserRoleUpdateView.as_view(), name='user-role-update'),
]
