# chat/config.py
from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_HISTORY_LIMIT = 20


@dataclass(frozen=True)
class AssistantConfig:
    """Immutable provider settings handed to the gateway and the service."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    referer: str = "http://localhost:3001"
    app_title: str = "Audit Vault Chat"
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_settings(cls, source=None) -> "AssistantConfig":
        source = source or settings
        return cls(
            api_key=getattr(source, "ASSISTANT_API_KEY", "") or "",
            model=getattr(source, "ASSISTANT_MODEL", None) or DEFAULT_MODEL,
            api_url=getattr(source, "ASSISTANT_API_URL", None) or DEFAULT_API_URL,
            timeout_s=float(getattr(source, "ASSISTANT_TIMEOUT_S", DEFAULT_TIMEOUT_S)),
            referer=getattr(source, "ASSISTANT_REFERER", cls.referer),
            app_title=getattr(source, "ASSISTANT_APP_TITLE", cls.app_title),
            history_limit=int(getattr(source, "CHAT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)),
        )
