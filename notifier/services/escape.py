"""MarkdownV2 escaping shared by the Telegram and VK Teams renderers."""

from __future__ import annotations

from typing import Any

from notifier.schemas import ASSIGNEE, COMMENT, PRIORITY, STATE

BODY_SPECIAL_CHARS = frozenset("_*[]()~`>#+-=|{}.!")
LINK_TEXT_SPECIAL_CHARS = BODY_SPECIAL_CHARS - {"[", "]"}

FIELD_ICONS = {
    STATE: "📊",
    PRIORITY: "⚡",
    ASSIGNEE: "👤",
    COMMENT: "💬",
}
DEFAULT_ICON = "📝"


def _escape_chars(text: Any, chars: frozenset[str]) -> str:
    return "".join("\\" + ch if ch in chars else ch for ch in str(text or ""))


def escape_markdown(text: Any) -> str:
    """Escape free text for a MarkdownV2 message body."""
    return _escape_chars(text, BODY_SPECIAL_CHARS)


def escape_link_text(text: Any) -> str:
    """Escape a link label; square brackets stay literal."""
    return _escape_chars(text, LINK_TEXT_SPECIAL_CHARS)


def escape_url(url: Any) -> str:
    """Escape a URL placed inside ``(...)`` of an inline link."""
    return str(url or "").replace("\\", "\\\\").replace(")", "\\)")


def field_icon(field: str) -> str:
    return FIELD_ICONS.get(field, DEFAULT_ICON)
