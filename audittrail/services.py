# audittrail/services.py
from authentication.models import User

from .models import ActivityLog


def log_activity(*, user=None, event_type="", target=None, request=None, metadata=None):
    """Append one ActivityLog row. Never updates existing rows."""
    metadata = dict(metadata or {})

    username = ""
    if user is not None and hasattr(user, "username"):
        username = user.username

    if not username and metadata.get("username"):
        username = metadata["username"]

    # only vault users can be linked; anything else keeps the name only
    if user is not None and not isinstance(user, User):
        if username and "username" not in metadata:
            metadata["username"] = username
        user = None

    target_app = target_model = target_id = target_repr = ""
    if target is not None:
        target_app = target._meta.app_label
        target_model = target._meta.model_name
        target_id = str(getattr(target, "pk", "") or "")
        target_repr = str(target)[:255]

    meta = getattr(request, "META", None) or {}
    ip = meta.get("REMOTE_ADDR") or None
    ua = meta.get("HTTP_USER_AGENT", "")
    req_id = meta.get("HTTP_X_REQUEST_ID", "")

    return ActivityLog.objects.create(
        user=user,
        username=username,
        event_type=event_type,
        target_app=target_app,
        target_model=target_model,
        target_id=target_id,
        target_repr=target_repr,
        ip_address=ip,
        user_agent=ua,
        request_id=req_id,
        metadata=metadata,
    )
