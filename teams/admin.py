from django.contrib import admin
from .models import Team, TeamMembership, JoinRequest


class TeamMembershipInline(admin.TabularInline):
    model = TeamMembership
    extra = 0
    raw_id_fields = ('user',)


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'leader', 'score', 'created_at')
    search_fields = ('name', 'slug', 'leader__email')
    ordering = ('-score',)
    inlines = [TeamMembershipInline]


@admin.register(TeamMembership)
class TeamMembershipAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'role', 'joined_at')
    list_filter = ('role',)
    search_fields = ('user__username', 'user__email', 'team__name')


@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'status', 'created_at', 'resolved_at')
    list_filter = ('status',)
    search_fields = ('user__username', 'team__name', 'team__slug')
