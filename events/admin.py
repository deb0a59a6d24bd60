from django.contrib import admin
from .models import Event, EventRegistration

@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'category', 'start_time', 'max_score', 'is_active')
    list_filter = ('category', 'is_active', 'start_time')
    search_fields = ('name', 'slug', 'description')
    prepopulated_fields = {'slug': ('name',)}

@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ('team', 'event', 'score', 'rank', 'registered_at')
    list_filter = ('event',)
    search_fields = ('team__name', 'team__slug', 'event__name')
