from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'roll_no', 'branch', 'is_staff', 'date_joined')
    list_filter = ('role', 'branch', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name', 'roll_no')
    fieldsets = UserAdmin.fieldsets + (
        ('Festival Profile', {'fields': ('role', 'roll_no', 'branch', 'phone', 'image')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Festival Profile', {'fields': ('role', 'roll_no', 'branch', 'phone')}),
    )
