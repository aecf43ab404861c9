"""Per-channel mention tokens for users listed in a comment."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from notifier.schemas import UserRef


class MentionStyle(str, Enum):
    PLAIN_NAME = "plain_name"
    LOGIN_TAG = "login_tag"
    EMAIL_BRACKET = "email_bracket"


def _plain_name(user: UserRef) -> str:
    return user.full_name or user.login or ""


def _login_tag(user: UserRef) -> str:
    if user.full_name:
        return user.full_name
    if user.email:
        return user.email
    if user.login:
        return f"@{user.login}"
    return ""


def _email_bracket(user: UserRef) -> str:
    # VK Teams resolves "@[email]" into a real mention; full name is never used.
    if user.email:
        return f"@[{user.email}]"
    if user.login:
        return f"@{user.login}"
    return ""


MENTION_FORMATTERS: dict[MentionStyle, Callable[[UserRef], str]] = {
    MentionStyle.PLAIN_NAME: _plain_name,
    MentionStyle.LOGIN_TAG: _login_tag,
    MentionStyle.EMAIL_BRACKET: _email_bracket,
}


def format_mention(style: MentionStyle, user: UserRef | None) -> str:
    """Return the mention token for ``user`` or ``""`` when it has no identity."""
    if user is None:
        return ""
    return MENTION_FORMATTERS[style](user)
