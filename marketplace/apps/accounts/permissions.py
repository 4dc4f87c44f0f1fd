from rest_framework.permissions import BasePermission

from .models import UserRole


class HasRole(BasePermission):
    """Allow principals whose role is in ``allowed_roles``."""

    allowed_roles = ()

    def has_permission(self, request, view):
        principal = request.user
        return bool(
            principal
            and principal.is_authenticated
            and principal.role in self.allowed_roles
        )


class IsCustomer(HasRole):
    allowed_roles = (UserRole.CUSTOMER,)


class IsAdmin(HasRole):
    allowed_roles = (UserRole.SUPER_ADMIN,)
