# fest-backend/events/models.py
from django.db import models


class Event(models.Model):
    CATEGORY_HACKATHON = "hackathon"
    CATEGORY_EXHIBITION = "exhibition"
    CATEGORY_COMPETITION = "competition"
    CATEGORY_WORKSHOP = "workshop"
    CATEGORY_SESSION = "session"

    CATEGORY_CHOICES = [
        (CATEGORY_HACKATHON, "Hackathon"),
        (CATEGORY_EXHIBITION, "Exhibition"),
        (CATEGORY_COMPETITION, "Competition"),
        (CATEGORY_WORKSHOP, "Workshop"),
        (CATEGORY_SESSION, "Session"),
    ]

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, default=CATEGORY_COMPETITION)

    # Free-text date shown on the public events page ("Day 2, 10 AM")
    date = models.CharField(max_length=100, blank=True, null=True)
    start_time = models.DateTimeField(blank=True, null=True)
    end_time = models.DateTimeField(blank=True, null=True)

    max_score = models.PositiveIntegerField(default=100)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['is_active', 'start_time'], name='event_active_start_idx'),
            models.Index(fields=['created_at'], name='event_created_idx'),
        ]

    def __str__(self):
        return self.name


class EventRegistration(models.Model):
    """
    A team's entry in an event. One row per (event, team); registering
    again is a no-op.
    """
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    team = models.ForeignKey("teams.Team", on_delete=models.CASCADE, related_name="event_registrations")
    registered_at = models.DateTimeField(auto_now_add=True)

    # Filled in by judges after the event
    score = models.IntegerField(blank=True, null=True)
    rank = models.PositiveIntegerField(blank=True, null=True)

    class Meta:
        unique_together = ('event', 'team')
        indexes = [
            models.Index(fields=['event', 'registered_at'], name='reg_event_registered_idx'),
            models.Index(fields=['team'], name='reg_team_idx'),
        ]

    def __str__(self):
        return f"{self.team.name} @ {self.event.name}"
