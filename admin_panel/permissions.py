from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access only to users holding the admin role."""
    message = "Admin access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class IsInternRole(BasePermission):
    """Allow access only to interns."""
    message = "Intern access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_intern)
