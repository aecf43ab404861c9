"""Display values for YouTrack fields, users and raw change values."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from notifier.schemas import (
    ASSIGNEE,
    COMMENT,
    PRIORITY,
    STATE,
    CommentValue,
    FieldValue,
    UserRef,
)
from notifier.services.mentions import MentionStyle, format_mention

UNSET_MARKER = "(Не установлен)"
MENTIONED_LABEL = "Упомянуты"

FIELD_TRANSLATIONS = {
    ASSIGNEE: "Назначена",
    COMMENT: "Комментарий",
    PRIORITY: "Приоритет",
    STATE: "Состояние",
}

# YouTrack may deliver comment text with markup already escaped.
UNESCAPE_SEQUENCES: tuple[tuple[str, str], ...] = (
    ("\\*", "*"),
    ("\\~", "~"),
    ("\\`", "`"),
    ("\\>", ">"),
    ("\\|", "|"),
)


def translate_field_name(field: str) -> str:
    return FIELD_TRANSLATIONS.get(field, field)


def field_display(field: Optional[FieldValue]) -> str:
    """Presentation if set, otherwise the raw name."""
    if field is None:
        return ""
    return field.presentation or field.name or ""


def user_display(user: Optional[UserRef]) -> str:
    """Full name if set, otherwise the login."""
    return format_mention(MentionStyle.PLAIN_NAME, user)


def render_comment(comment: CommentValue, style: MentionStyle) -> str:
    text = comment.text
    for needle, replacement in UNESCAPE_SEQUENCES:
        text = text.replace(needle, replacement)

    mentions = [format_mention(style, user) for user in comment.mentioned_users]
    mentions = [m for m in mentions if m]
    if mentions:
        text += f"\n[{MENTIONED_LABEL}: {', '.join(mentions)}]"
    return text


class ChangeValueDecoder:
    """
    Turn an opaque ``oldValue``/``newValue`` into a display string.

    The value may be already-decoded JSON (as held by :class:`Change`) or raw
    JSON bytes. Anything that cannot be interpreted for the given field tag
    yields ``unset_marker``; this never raises.
    """

    def __init__(
        self,
        mention_style: MentionStyle = MentionStyle.PLAIN_NAME,
        unset_marker: str = UNSET_MARKER,
    ) -> None:
        self.mention_style = mention_style
        self.unset_marker = unset_marker

    def __call__(self, value: Any, field: str) -> str:
        return self.decode(value, field)

    def decode(self, value: Any, field: str) -> str:
        if isinstance(value, (bytes, bytearray)):
            raw = bytes(value).decode("utf-8", errors="replace").strip()
            if not raw or raw == "null":
                return self.unset_marker
            try:
                value = json.loads(raw)
            except ValueError:
                return self.unset_marker
        if value is None:
            return self.unset_marker

        if field in (STATE, PRIORITY):
            parsed = self._validate(FieldValue, value)
            return self.unset_marker if parsed is None else field_display(parsed)
        if field == ASSIGNEE:
            parsed = self._validate(UserRef, value)
            return self.unset_marker if parsed is None else user_display(parsed)
        if field == COMMENT:
            parsed = self._validate(CommentValue, value)
            if parsed is None:
                return self.unset_marker
            return render_comment(parsed, self.mention_style)

        if isinstance(value, str):
            return value
        if isinstance(value, Mapping):
            for key in ("name", "value"):
                candidate = value.get(key)
                if isinstance(candidate, str) and candidate:
                    return candidate
        return self.unset_marker

    @staticmethod
    def _validate(model, value: Any):
        if not isinstance(value, Mapping):
            return None
        try:
            return model.model_validate(value)
        except ValidationError:
            return None
