"""Shared payload builders."""

from __future__ import annotations

from typing import Any

import pytest

from notifier.schemas import WebhookPayload


def make_payload(**overrides: Any) -> WebhookPayload:
    data: dict[str, Any] = {
        "project": {"name": "Proj", "presentation": "Proj"},
        "issue": {
            "summary": "Fix bug",
            "url": "https://x/1",
            "state": {"name": "Open", "presentation": "Открыта"},
            "priority": {"name": "Normal", "presentation": "Обычный"},
            "assignee": {"fullName": "John Doe", "login": "john", "email": "john@example.com"},
        },
        "updater": {"fullName": "Jane Roe", "login": "jane"},
        "changes": [],
    }
    data.update(overrides)
    return WebhookPayload.model_validate(data)


@pytest.fixture
def payload() -> WebhookPayload:
    return make_payload()
