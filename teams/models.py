# fest-backend/teams/models.py
from django.conf import settings
from django.db import models


class Team(models.Model):
    """
    A festival team. The slug is the human-shareable team code people
    paste into the join form.

    Invariant: the leader always holds the team's single leader membership.
    """
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="led_teams",
    )
    score = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["created_at"], name="team_created_idx"),
            models.Index(fields=["-score"], name="team_score_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    @property
    def current_size(self):
        return self.memberships.count()


class TeamMembership(models.Model):
    """
    At most one membership per user, system-wide. The OneToOne column is
    what makes concurrent create/accept calls for the same user collide
    at commit.
    """
    ROLE_LEADER = "leader"
    ROLE_MEMBER = "member"

    ROLE_CHOICES = [
        (ROLE_LEADER, "Team Leader"),
        (ROLE_MEMBER, "Member"),
    ]

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="memberships")
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_membership",
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["team", "joined_at"], name="membership_team_joined_idx"),
        ]

    def __str__(self):
        return f"{self.user.username} in {self.team.name}"

    @property
    def is_leader(self):
        return self.role == self.ROLE_LEADER


class JoinRequest(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
    ]

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="join_requests")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="join_requests",
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    resolved_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            # Resolved requests are history; only one open request per pair
            models.UniqueConstraint(
                fields=["team", "user"],
                condition=models.Q(status="pending"),
                name="unique_pending_join_request",
            ),
        ]
        indexes = [
            models.Index(fields=["team", "status"], name="joinreq_team_status_idx"),
            models.Index(fields=["user", "status"], name="joinreq_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.user.username} -> {self.team.name} ({self.status})"
