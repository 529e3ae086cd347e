# chat/formatting.py
import re

DEFAULT_TITLE = "New Chat"
TITLE_MAX_CHARS = 80

# Applied in this order; each pattern only works within a single line.
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_STAR = re.compile(r"\*(.*?)\*")
_ITALIC_UNDERSCORE = re.compile(r"_(.*?)_")
_HEADING = re.compile(r"^[ \t]*#{1,6}[ \t]+", re.M)
_LIST_DASH = re.compile(r"^[ \t]*-[ \t]+", re.M)

_STEPS = (
    (_BOLD, r"\1"),
    (_ITALIC_STAR, r"\1"),
    (_ITALIC_UNDERSCORE, r"\1"),
    (_HEADING, ""),
    (_LIST_DASH, ""),
)


def _strip_markdown_once(text: str) -> str:
    for pattern, repl in _STEPS:
        text = pattern.sub(repl, text)
    return text.strip()


def sanitize_reply(text: str) -> str:
    """
    Strip the markdown the model likes to emit (bold, italics, headings,
    list dashes) so the reply renders as plain text.

    The substitution pass is repeated until nothing changes, so
    sanitize_reply(sanitize_reply(x)) == sanitize_reply(x). Every effective
    substitution shortens the text, which bounds the loop.
    """
    if not text:
        return ""
    previous = None
    out = text
    while out != previous:
        previous = out
        out = _strip_markdown_once(out)
    return out


def make_session_title(message: str) -> str:
    t = (message or "").strip()
    return t[:TITLE_MAX_CHARS] or DEFAULT_TITLE
