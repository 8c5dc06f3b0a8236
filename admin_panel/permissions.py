from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdminRole(BasePermission):
    """Allow access only to platform admins."""
    message = "Admin access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin_role)


class IsInstructorOrAdmin(BasePermission):
    """Allow access to instructors and admins."""
    message = "Instructor or admin access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and (
            request.user.is_admin_role or request.user.is_instructor_role
        ))


class IsOwnerInstructorOrAdmin(BasePermission):
    """Object-level: the owning instructor or an admin may modify."""
    message = "You do not own this resource"

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and (
            user.is_admin_role or getattr(obj, 'instructor_id', None) == user.id
        ))
