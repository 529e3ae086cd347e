# chat/provider.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

from .config import AssistantConfig

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I could not generate a response."


# ===== Exceptions =====

class ProviderError(RuntimeError):
    """The provider could not be reached or answered with an error."""


class ProviderConfigError(ProviderError):
    """The provider is not configured (missing credential)."""


# ===== Port =====

class CompletionProvider(Protocol):
    def ensure_configured(self) -> None: ...

    def complete(self, messages: List[Dict[str, str]]) -> str: ...


# ===== Helpers =====

def _extract_content(data: Any) -> Optional[str]:
    """Return choices[0].message.content, or None when the shape is off."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or []
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message") or {}
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


# ===== Adapter =====

class ChatCompletionClient:
    """
    One POST to an OpenAI-style /chat/completions endpoint.

    No retries: any transport failure, timeout, non-2xx status or non-JSON
    body becomes a ProviderError after being logged.
    """

    def __init__(self, config: AssistantConfig, http=None) -> None:
        self.config = config
        self._http = http or requests

    def ensure_configured(self) -> None:
        if not self.config.is_configured:
            raise ProviderConfigError("assistant_api_key_missing")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.referer,
            "X-Title": self.config.app_title,
        }

    def complete(self, messages: List[Dict[str, str]]) -> str:
        self.ensure_configured()

        payload = {"model": self.config.model, "messages": messages}
        try:
            resp = self._http.post(
                self.config.api_url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout_s,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.exception(
                "assistant_provider_error model=%s url=%s messages=%d",
                self.config.model,
                self.config.api_url,
                len(messages),
            )
            raise ProviderError(str(e)) from e

        content = _extract_content(data)
        if content is None:
            logger.warning("assistant_provider_empty_reply model=%s", self.config.model)
            return FALLBACK_REPLY
        return content
