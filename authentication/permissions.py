from rest_framework.permissions import BasePermission


class IsAuthenticatedAndVerified(BasePermission):
    """Authenticated and verified user permission using custom session auth.

    A request is permitted when SessionUserAuthentication resolved a user
    and that user is verified and active.
    """

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if user is None:
            return False
        return bool(getattr(user, "is_authenticated", False))
