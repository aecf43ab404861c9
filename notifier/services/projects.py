"""Which channels (and chats) a YouTrack project notifies."""

from __future__ import annotations

from typing import Mapping, Optional

import structlog

from notifier.config import CHANNEL_TELEGRAM, CHANNEL_VKTEAMS, ProjectConfig
from notifier.schemas import WebhookPayload

logger = structlog.get_logger()


class ProjectRouter:
    def __init__(self, projects: Mapping[str, ProjectConfig]) -> None:
        self._projects = {name.lower(): cfg for name, cfg in projects.items()}

    def get(self, project_name: str) -> Optional[ProjectConfig]:
        normalized = (project_name or "").lower()
        project = self._projects.get(normalized)
        if project is None:
            logger.debug(
                "Project not found in configuration",
                project=project_name,
                available_projects=sorted(self._projects),
            )
        return project

    def allowed_channels(self, payload: WebhookPayload) -> list[str]:
        name = payload.project_name
        if not name:
            return []
        project = self.get(name)
        return list(project.allowed_channels) if project else []

    def chat_id(self, project_name: str, channel: str) -> Optional[str]:
        project = self.get(project_name)
        if project is None or channel not in project.allowed_channels:
            return None
        if channel == CHANNEL_TELEGRAM:
            return project.telegram_chat_id
        if channel == CHANNEL_VKTEAMS:
            return project.vkteams_chat_id
        return None
