# chat/context.py
"""
Prompt assembly for the assistant.

The payload sent to the provider is always, in order:
  1. the fixed system prompt,
  2. an optional system message describing the documents the user picked,
  3. the recent conversation history, oldest first.
"""
from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional, Sequence

from documents.models import Document

SYSTEM_PROMPT = (
    "You are an AI assistant helping with investment fund compliance documents "
    "inside an internal tool called Audit Vault.\n"
    "- Be precise and conservative: never invent document contents.\n"
    "- When asked about compliance, base your answers ONLY on the provided "
    "document metadata and user messages.\n"
    "- If something is unclear or not in the data, explicitly say what is missing."
)

DOCUMENTS_INTRO = "The user has selected the following compliance documents to discuss:"
DOCUMENTS_OUTRO = (
    "Use ONLY this information plus the conversation history to answer questions, "
    "and clearly say when information is not available in these documents."
)


def _valid_ids(document_ids: Iterable[str]) -> List[uuid.UUID]:
    out = []
    for raw in document_ids:
        try:
            out.append(uuid.UUID(str(raw)))
        except (TypeError, ValueError, AttributeError):
            # unknown id format; treated the same as a missing document
            continue
    return out


def load_documents(document_ids: Optional[Sequence[str]]) -> List[Document]:
    """Fetch the selected documents with their fund. Missing ids are dropped."""
    if not document_ids:
        return []
    ids = _valid_ids(document_ids)
    if not ids:
        return []
    return list(
        Document.objects.select_related("fund")
        .filter(pk__in=ids)
        .order_by("created_at", "title")
    )


def render_document(doc: Document) -> str:
    return (
        f"- Title: {doc.title}\n"
        f"  Fund: {doc.fund_label}\n"
        f"  Type: {doc.type}\n"
        f"  Status: {doc.status}\n"
        f"  Period: {doc.period_start.isoformat()} – {doc.period_end.isoformat()}\n"
        f"  Description: {doc.description or 'n/a'}\n"
    )


def build_documents_context(docs: Sequence[Document]) -> str:
    if not docs:
        return ""
    blocks = "\n".join(render_document(d) for d in docs)
    return f"{DOCUMENTS_INTRO}\n{blocks}\n{DOCUMENTS_OUTRO}"


def build_messages(history: Sequence, documents_context: str = "") -> List[Dict[str, str]]:
    """history: ChatMessage-like objects with .role and .content, oldest first."""
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    if documents_context:
        messages.append({"role": "system", "content": documents_context})
    for m in history:
        role = "assistant" if m.role == "assistant" else "user"
        messages.append({"role": role, "content": m.content})
    return messages
