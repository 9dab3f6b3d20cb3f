# user/permissions.py
from rest_framework import permissions

from .models import Role


def _role_of(request):
    user = request.user
    if not user or not user.is_authenticated:
        return None
    return getattr(user, 'role', None)


class HasRole(permissions.BasePermission):
    """Grants access to authenticated users whose role is in `roles`."""
    roles = ()

    def has_permission(self, request, view):
        return _role_of(request) in self.roles


class IsManager(HasRole):
    roles = (Role.MANAGER,)


class IsManagerOrReadOnly(permissions.BasePermission):
    """Any authenticated user may read; only managers may write."""

    def has_permission(self, request, view):
        role = _role_of(request)
        if role is None:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return role == Role.MANAGER


class IsBarOrManager(HasRole):
    roles = (Role.BAR, Role.MANAGER)


class IsKitchenOrManager(HasRole):
    roles = (Role.KITCHEN, Role.MANAGER)


class CanPlaceOrders(HasRole):
    roles = (Role.CUSTOMER, Role.WAITER, Role.MANAGER)


class CanPrepareItems(HasRole):
    roles = (Role.KITCHEN, Role.BAR, Role.MANAGER)


class CanServeOrders(HasRole):
    roles = (Role.WAITER, Role.MANAGER)
