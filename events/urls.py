from django.urls import path
from .views import (
    EventListView,
    AdminEventCreateView,
    AdminEventDetailView,
    RegisterEventView,
    MyEventRegistrationsView,
    EventRegistrationListView,
    EventRegistrationUpdateView,
)

urlpatterns = [
    path('', EventListView.as_view(), name='event-list'),
    path('me/registrations/', MyEventRegistrationsView.as_view(), name='event-my-registrations'),

    # Admin
    path('admin/', AdminEventCreateView.as_view(), name='event-admin-create'),
    path('admin/<int:event_id>/', AdminEventDetailView.as_view(), name='event-admin-detail'),
    path('admin/registrations/', EventRegistrationListView.as_view(), name='event-admin-registrations'),
    path('admin/registrations/<int:registration_id>/', EventRegistrationUpdateView.as_view(), name='event-admin-registration-update'),

    path('<slug:slug>/register/', RegisterEventView.as_view(), name='event-register'),
]
