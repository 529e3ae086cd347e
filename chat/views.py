# chat/views.py
import logging

from django.conf import settings
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from audittrail.models import ActivityLog
from audittrail.services import log_activity

from . import service as chat_service
from .exceptions import AssistantNotConfigured, AssistantUnavailable
from .provider import ProviderConfigError
from .serializers import (
    ChatMessageSerializer,
    ChatSessionDetailSerializer,
    ChatSessionListSerializer,
    SendChatSerializer,
)

log = logging.getLogger(__name__)


def _send_rate(group, request):
    return getattr(settings, "CHAT_SEND_RATE", "30/m")


@api_view(["GET"])
def sessions(request):
    """List the caller's sessions, newest first."""
    items = chat_service.list_sessions(request.user.user_id)
    return Response(ChatSessionListSerializer(items, many=True).data)


@api_view(["GET", "DELETE"])
def session_detail(request, sid):
    """
    GET: the session with its messages, oldest first.
    DELETE: remove the session and its messages.

    A session that does not exist and one owned by someone else look the
    same: 200 with an empty body.
    """
    user_id = request.user.user_id

    if request.method == "GET":
        sess = chat_service.get_session(user_id, sid)
        if sess is None:
            return Response(None, status=status.HTTP_200_OK)
        return Response(ChatSessionDetailSerializer(sess).data)

    # DELETE
    deleted = chat_service.delete_session(user_id, sid)
    if deleted is None:
        return Response(None, status=status.HTTP_200_OK)
    log_activity(
        user=request.user,
        event_type=ActivityLog.EventType.CHAT_SESSION_DELETED,
        target=deleted,
        request=request,
    )
    return Response({"success": True}, status=status.HTTP_200_OK)


@api_view(["POST"])
@ratelimit(key="ip", rate=_send_rate, method="POST", block=False)
def send(request):
    """
    Store the user's message, ask the assistant, store and return its reply.

    Body: {"message": str, "sessionId": str|null, "documentIds": [str]}
    """
    if getattr(request, "limited", False):
        log.warning("Chat send rate limit exceeded for IP: %s", request.META.get("REMOTE_ADDR"))
        return Response(
            {
                "error": "Too many chat requests. Please try again later.",
                "retry_after": "1 minute",
            },
            status=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    body = SendChatSerializer(data=request.data)
    body.is_valid(raise_exception=True)
    data = body.validated_data

    svc = chat_service.build_chat_service()
    try:
        result = svc.send(
            request.user.user_id,
            data["message"],
            session_id=data.get("sessionId"),
            document_ids=data.get("documentIds"),
        )
    except ProviderConfigError:
        raise AssistantNotConfigured()
    except chat_service.ChatSendError as e:
        log_activity(
            user=request.user,
            event_type=ActivityLog.EventType.CHAT_PROVIDER_FAILED,
            target=e.session,
            request=request,
            metadata={"user_message_id": e.user_message.pk},
        )
        raise AssistantUnavailable()

    if result.created_session:
        log_activity(
            user=request.user,
            event_type=ActivityLog.EventType.CHAT_SESSION_CREATED,
            target=result.session,
            request=request,
        )
    log_activity(
        user=request.user,
        event_type=ActivityLog.EventType.CHAT_MESSAGE_SENT,
        target=result.session,
        request=request,
        metadata={
            "document_ids": list(data.get("documentIds") or []),
            "user_message_id": result.user_message.pk,
            "assistant_message_id": result.assistant_message.pk,
        },
    )

    return Response(
        {
            "sessionId": str(result.session.id),
            "sessionTitle": result.session.title,
            "userMessage": ChatMessageSerializer(result.user_message).data,
            "assistantMessage": ChatMessageSerializer(result.assistant_message).data,
        },
        status=status.HTTP_200_OK,
    )
