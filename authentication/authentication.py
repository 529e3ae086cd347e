from django.core.exceptions import ValidationError
from rest_framework.authentication import SessionAuthentication

from .models import User

SESSION_USER_ID = 'user_id'
SESSION_USERNAME = 'username'


class SessionUserAuthentication(SessionAuthentication):
    """
    Resolve request.user from the session keys written by the login flow.

    The session must carry both 'user_id' and 'username', and they must
    point at the same row. Anything else is treated as anonymous.
    Unsafe methods from a resolved user must carry a valid CSRF token.
    """

    def authenticate(self, request):
        session = getattr(request._request, 'session', None)
        if session is None:
            return None

        user_id = session.get(SESSION_USER_ID)
        username = session.get(SESSION_USERNAME)
        if not user_id or not username:
            return None

        try:
            user = User.objects.get(user_id=user_id, username=username)
        except (User.DoesNotExist, ValidationError, ValueError):
            return None

        self.enforce_csrf(request)
        return (user, None)

