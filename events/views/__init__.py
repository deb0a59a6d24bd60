from .events import (
    EventListView,
    AdminEventCreateView,
    AdminEventDetailView,
)
from .registrations import (
    RegisterEventView,
    MyEventRegistrationsView,
    EventRegistrationListView,
    EventRegistrationUpdateView,
)
