from .drf_permissions import IsAdmin, RoleBasedPermission


class RoleMixin:
    """Restricts a view to ``allowed_roles`` (administrators always pass)."""

    permission_classes = [RoleBasedPermission]
    allowed_roles = ()


class AdminOnlyMixin:
    permission_classes = [IsAdmin]
