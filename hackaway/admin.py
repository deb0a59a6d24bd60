from django.contrib import admin
from .models import HackawayRegistration, ProblemStatementSetting

@admin.register(HackawayRegistration)
class HackawayRegistrationAdmin(admin.ModelAdmin):
    list_display = ('team', 'problem_statement_no', 'slot', 'rank', 'is_qualified', 'registered_at')
    list_filter = ('problem_statement_no', 'is_qualified')
    search_fields = ('team__name', 'team__slug')
    readonly_fields = ('slot',)

@admin.register(ProblemStatementSetting)
class ProblemStatementSettingAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'max_participants', 'is_active', 'updated_at')
    list_editable = ('is_active',)
