from django.db import models
import uuid


class User(models.Model):
    """
    A caller known to the vault.

    Credentials live with the external identity provider; this table only
    holds what the backend needs to scope data and enforce verification.
    """
    user_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )
    username = models.CharField(
        max_length=150,
        unique=True
    )
    display_name = models.CharField(
        max_length=150,
        blank=True,
        default=""
    )
    email = models.EmailField(
        unique=True
    )
    roles = models.JSONField(
        default=list
    )
    is_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    last_accessed = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['email']

    def __str__(self):
        return self.username

    @property
    def is_anonymous(self):
        return False

    @property
    def is_authenticated(self):
        """
        A user counts as authenticated when the record exists, the email is
        verified and the account is active.
        """
        if not getattr(self, 'user_id', None):
            return False
        if not getattr(self, 'is_verified', False):
            return False
        if not getattr(self, 'is_active', True):
            return False
        return True
