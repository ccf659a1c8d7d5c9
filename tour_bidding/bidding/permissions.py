from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsOwnerOrReadOnly(BasePermission):
    """Any signed-in user can read; only the owner (or a superuser) can change the object."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        # Allow GET, HEAD, OPTIONS to anyone authenticated
        if request.method in SAFE_METHODS:
            return True
        if request.user.is_superuser:
            return True
        return obj.owner_id == request.user.pk
