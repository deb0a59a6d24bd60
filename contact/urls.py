from django.urls import path
from .views import ContactSubmitView, ContactSubmissionListView

urlpatterns = [
    path('', ContactSubmitView.as_view(), name='contact-submit'),
    path('admin/', ContactSubmissionListView.as_view(), name='contact-admin-list'),
]
