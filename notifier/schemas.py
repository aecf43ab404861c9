"""Webhook payload schemas"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Field tags tracked by the renderers
STATE = "State"
PRIORITY = "Priority"
ASSIGNEE = "Assignee"
COMMENT = "Comment"


class PayloadError(ValueError):
    """Raised when a webhook body cannot be decoded into a payload."""


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


def _null_as_empty_str(value: Any) -> Any:
    return "" if value is None else value


def _null_as_empty_list(value: Any) -> Any:
    return [] if value is None else value


class FieldValue(_Frozen):
    """Structured field value (project, state, priority)."""

    name: Optional[str] = None
    presentation: Optional[str] = None


class UserRef(_Frozen):
    """User reference as sent by YouTrack."""

    full_name: Optional[str] = Field(default=None, alias="fullName")
    login: Optional[str] = None
    email: Optional[str] = None


class CommentValue(_Frozen):
    text: str = ""
    mentioned_users: list[UserRef] = Field(default_factory=list, alias="mentionedUsers")

    null_text = field_validator("text", mode="before")(_null_as_empty_str)

    @field_validator("mentioned_users", mode="before")
    @classmethod
    def null_users(cls, value: Any) -> Any:
        # null entries decode as empty users and are dropped when rendered
        if isinstance(value, list):
            return [{} if user is None else user for user in value]
        return _null_as_empty_list(value)


class Change(_Frozen):
    """
    One field mutation.

    ``old_value`` / ``new_value`` keep the decoded JSON as-is; their shape
    depends on ``field`` and is interpreted only at render time.
    """

    field: str = ""
    old_value: Any = Field(default=None, alias="oldValue")
    new_value: Any = Field(default=None, alias="newValue")

    null_field = field_validator("field", mode="before")(_null_as_empty_str)


class Issue(_Frozen):
    summary: str = ""
    url: str = ""
    state: Optional[FieldValue] = None
    priority: Optional[FieldValue] = None
    assignee: Optional[UserRef] = None

    null_strings = field_validator("summary", "url", mode="before")(_null_as_empty_str)


class WebhookPayload(_Frozen):
    """
    Minimal model for the YouTrack workflow webhook.
    Only fields used by the renderers are included.
    """

    project: Optional[FieldValue] = None
    issue: Issue
    updater: Optional[UserRef] = None
    changes: list[Change] = Field(default_factory=list)

    null_changes = field_validator("changes", mode="before")(_null_as_empty_list)

    @property
    def project_name(self) -> str:
        if self.project is None:
            return ""
        return self.project.name or ""


def parse_payload(body: bytes | str) -> WebhookPayload:
    """Decode a raw request body into a :class:`WebhookPayload`."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"failed to decode webhook body: {exc}") from exc
    if not isinstance(data, dict):
        raise PayloadError("webhook body must be a JSON object")
    try:
        return WebhookPayload.model_validate(data)
    except ValidationError as exc:
        raise PayloadError(f"failed to unmarshal webhook payload: {exc}") from exc
