from rest_framework import permissions

from .utils import is_admin, is_authenticated


class RoleBasedPermission(permissions.BasePermission):
    message = "Your role is not allowed to perform this action."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not is_authenticated(user):
            return False

        if is_admin(user):
            return True

        allowed_roles = getattr(view, "allowed_roles", None)
        if not allowed_roles:
            return False

        return user.role in allowed_roles


class IsAdmin(permissions.BasePermission):
    message = "Administrators only."

    def has_permission(self, request, view) -> bool:
        return is_admin(request.user)
