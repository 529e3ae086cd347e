# audittrail/models.py
from django.db import models


class ActivityLog(models.Model):
    class EventType(models.TextChoices):
        # chat
        CHAT_SESSION_CREATED = "CHAT_SESSION_CREATED", "Chat session created"
        CHAT_MESSAGE_SENT = "CHAT_MESSAGE_SENT", "Chat message sent"
        CHAT_SESSION_DELETED = "CHAT_SESSION_DELETED", "Chat session deleted"
        CHAT_PROVIDER_FAILED = "CHAT_PROVIDER_FAILED", "Chat provider failed"

    # who did it (FK)
    user = models.ForeignKey(
        "authentication.User",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="activity_logs",
    )

    # snapshot of username at the time of the event
    username = models.CharField(max_length=150, blank=True, default="")

    # what happened
    event_type = models.CharField(max_length=64, choices=EventType.choices)

    # when
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    # target info (denormalized)
    target_app = models.CharField(max_length=64, blank=True, default="")
    target_model = models.CharField(max_length=64, blank=True, default="")
    target_id = models.CharField(max_length=64, blank=True, default="")
    target_repr = models.CharField(max_length=255, blank=True, default="")

    # request context
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default="")
    request_id = models.CharField(max_length=128, blank=True, default="")

    # extra
    metadata = models.JSONField(blank=True, default=dict)

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["event_type", "created_at"]),
            models.Index(fields=["target_app", "target_model", "target_id"]),
        ]

    def __str__(self):
        who = self.username or "system"
        return f"[{self.event_type}] by {who} at {self.created_at}"
