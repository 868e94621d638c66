"""Role based permissions for the inventory API."""

from rest_framework.permissions import BasePermission

from .models import StaffProfile


def get_role(user):
    return StaffProfile.role_for(user)


def is_super_admin(user):
    return get_role(user) == StaffProfile.ROLE_SUPER_ADMIN


class HasRole(BasePermission):
    """Allow authenticated users whose role is in ``allowed_roles``."""

    allowed_roles = ()
    message = 'Access denied. Insufficient permissions.'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False
        return get_role(user) in self.allowed_roles


class IsSuperAdmin(HasRole):
    allowed_roles = (StaffProfile.ROLE_SUPER_ADMIN,)


class IsAdminOrSuperAdmin(HasRole):
    allowed_roles = (StaffProfile.ROLE_SUPER_ADMIN, StaffProfile.ROLE_ADMIN)
