# chat/service.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence

from django.db.models import Count, Prefetch

from .config import AssistantConfig
from .context import build_documents_context, build_messages, load_documents
from .formatting import make_session_title, sanitize_reply
from .models import ChatMessage, ChatSession
from .provider import ChatCompletionClient, CompletionProvider, ProviderError

log = logging.getLogger(__name__)


class ChatSendError(RuntimeError):
    """The provider call failed after the user message was stored."""

    def __init__(self, session: ChatSession, user_message: ChatMessage) -> None:
        super().__init__("assistant_unavailable")
        self.session = session
        self.user_message = user_message


@dataclass
class SendResult:
    session: ChatSession
    user_message: ChatMessage
    assistant_message: ChatMessage
    created_session: bool = False


def _as_uuid(value) -> Optional[uuid.UUID]:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


# =========================
# Session queries
# =========================

def list_sessions(user_id) -> List[ChatSession]:
    """Sessions owned by user_id, newest first, each with message_count."""
    return list(
        ChatSession.objects.filter(user_id=user_id)
        .annotate(message_count=Count("messages"))
        .order_by("-created_at")
    )


def get_session(user_id, session_id) -> Optional[ChatSession]:
    """The session with its messages oldest first, or None if missing or not owned."""
    sid = _as_uuid(session_id)
    if sid is None:
        return None
    return (
        ChatSession.objects.filter(pk=sid, user_id=user_id)
        .prefetch_related(
            Prefetch("messages", queryset=ChatMessage.objects.order_by("created_at", "id"))
        )
        .first()
    )


def delete_session(user_id, session_id) -> Optional[ChatSession]:
    """Delete an owned session and its messages. Returns the deleted row or None."""
    sid = _as_uuid(session_id)
    if sid is None:
        return None
    session = ChatSession.objects.filter(pk=sid, user_id=user_id).first()
    if session is None:
        return None
    session.delete()
    session.pk = sid
    return session


def recent_history(session: ChatSession, limit: int) -> List[ChatMessage]:
    """The last `limit` messages of the session, oldest first."""
    newest_first = list(session.messages.order_by("-created_at", "-id")[:limit])
    newest_first.reverse()
    return newest_first


# =========================
# Application service
# =========================

@dataclass
class ChatService:
    """Sends one user message and stores the assistant's reply."""
    config: AssistantConfig
    provider: CompletionProvider

    def resolve_session(self, user_id, session_id, message: str):
        """
        Return (session, created). A session id that is missing, malformed or
        owned by someone else is ignored and a new session is started.
        """
        sid = _as_uuid(session_id)
        if sid is not None:
            existing = ChatSession.objects.filter(pk=sid, user_id=user_id).first()
            if existing is not None:
                return existing, False
            log.info("chat_session_ignored user=%s session=%s", user_id, sid)

        session = ChatSession.objects.create(
            user_id=user_id,
            title=make_session_title(message),
        )
        return session, True

    def send(
        self,
        user_id,
        message: str,
        session_id: Optional[str] = None,
        document_ids: Optional[Sequence[str]] = None,
    ) -> SendResult:
        # fail before touching the database when there is no credential
        self.provider.ensure_configured()

        session, created = self.resolve_session(user_id, session_id, message)

        user_message = ChatMessage.objects.create(
            session=session, role=ChatMessage.ROLE_USER, content=message
        )

        history = recent_history(session, self.config.history_limit)
        documents_context = build_documents_context(load_documents(document_ids))
        messages = build_messages(history, documents_context)

        try:
            raw_reply = self.provider.complete(messages)
        except ProviderError as e:
            raise ChatSendError(session, user_message) from e

        assistant_message = ChatMessage.objects.create(
            session=session,
            role=ChatMessage.ROLE_ASSISTANT,
            content=sanitize_reply(raw_reply),
        )
        session.save(update_fields=["updated_at"])

        return SendResult(
            session=session,
            user_message=user_message,
            assistant_message=assistant_message,
            created_session=created,
        )


def build_chat_service(config: Optional[AssistantConfig] = None) -> ChatService:
    config = config or AssistantConfig.from_settings()
    return ChatService(config=config, provider=ChatCompletionClient(config))
