from rest_framework.permissions import BasePermission


def is_admin(user) -> bool:
    """
    Festival admin: superuser or user.role == 'admin'.
    Moderators can see the dashboard but not change settings.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False

    if getattr(user, "is_superuser", False):
        return True

    return getattr(user, "role", None) == "admin"


def is_staff_role(user) -> bool:
    if is_admin(user):
        return True
    return getattr(user, "role", None) == "moderator"


class IsFestAdmin(BasePermission):
    message = "Only admins can manage this resource."

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsFestStaff(BasePermission):
    """Admins and moderators (read-side dashboards)."""
    message = "Only admins and moderators can view the dashboard."

    def has_permission(self, request, view):
        return is_staff_role(request.user)
