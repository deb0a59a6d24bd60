# fest-backend/hackaway/models.py
from django.db import models


class HackawayRegistration(models.Model):
    """
    A team's HackAway entry for exactly one problem statement.

    `slot` is the seat the team holds on its track, 1..max at the time of
    registration. The (problem_statement_no, slot) constraint is what
    stops two teams racing for the last seat from both committing.
    """
    team = models.OneToOneField(
        "teams.Team",
        on_delete=models.CASCADE,
        related_name="hackaway_registration",
    )
    problem_statement_no = models.PositiveSmallIntegerField()
    slot = models.PositiveSmallIntegerField()

    # Judging
    rank = models.PositiveIntegerField(blank=True, null=True)
    is_qualified = models.BooleanField(default=False)
    ppt_link = models.URLField(max_length=1024, blank=True, null=True)

    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["problem_statement_no", "slot"],
                name="unique_hackaway_track_slot",
            ),
        ]
        indexes = [
            models.Index(fields=["problem_statement_no"], name="hackaway_track_idx"),
            models.Index(fields=["registered_at"], name="hackaway_registered_idx"),
        ]

    def __str__(self):
        return f"{self.team.name} -> PS{self.problem_statement_no} (#{self.slot})"


class ProblemStatementSetting(models.Model):
    """Admin override of a compiled-in problem statement; see hackaway.constants."""
    id = models.PositiveSmallIntegerField(primary_key=True)
    title = models.CharField(max_length=255)
    max_participants = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"PS{self.id}: {self.title} (max {self.max_participants})"
