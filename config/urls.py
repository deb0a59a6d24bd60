from django.contrib import admin
from django.urls import path, include
from core.views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    path("api/health/", HealthCheckView.as_view(), name="health-check"),
    path('api/users/', include('users.urls')),
    path('api/teams/', include('teams.urls')),
    path('api/events/', include('events.urls')),
    path('api/hackaway/', include('hackaway.urls')),
    path('api/dashboard/', include('dashboard.urls')),
    path('api/contact/', include('contact.urls')),
]
