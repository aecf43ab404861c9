"""Turn one YouTrack webhook into notifications on every allowed channel."""

from __future__ import annotations

import structlog

from notifier.config import CHANNEL_TELEGRAM, CHANNEL_VKTEAMS, Settings
from notifier.schemas import WebhookPayload
from notifier.services.delivery import Sender
from notifier.services.projects import ProjectRouter
from notifier.services.registry import FormatterRegistry
from notifier.services.renderers import Layout, telegram_renderer, vkteams_renderer
from notifier.utils import DeliveryError

logger = structlog.get_logger()

CHAT_CHANNELS = (CHANNEL_TELEGRAM, CHANNEL_VKTEAMS)


def build_registry(settings: Settings) -> FormatterRegistry:
    """Registry with the Markdown renderers for Telegram and VK Teams."""
    registry = FormatterRegistry()
    registry.register(CHANNEL_TELEGRAM, telegram_renderer(Layout(settings.telegram_layout)))
    registry.register(CHANNEL_VKTEAMS, vkteams_renderer(Layout(settings.vkteams_layout)))
    return registry


class WebhookService:
    def __init__(self, router: ProjectRouter, registry: FormatterRegistry, sender: Sender) -> None:
        self.router = router
        self.registry = registry
        self.sender = sender

    async def process(self, payload: WebhookPayload) -> list[str]:
        """
        Format and send ``payload`` to each allowed channel.

        Returns the channels the notification was delivered to. Delivery
        failures on one channel do not stop the others.
        """
        project = payload.project_name
        channels = self.router.allowed_channels(payload)
        if not channels:
            if project:
                logger.info(
                    "Project configuration not found or no allowed channels, ignoring notification",
                    project=project,
                )
            else:
                logger.warning("Project name is empty in webhook payload, ignoring notification")
            return []

        delivered: list[str] = []
        for channel in channels:
            message = self.registry.format(payload, channel)

            chat_id = None
            if channel in CHAT_CHANNELS:
                chat_id = self.router.chat_id(project, channel)
                if not chat_id:
                    logger.warning(
                        "Chat ID not found for project, skipping notification",
                        project=project,
                        channel=channel,
                    )
                    continue

            try:
                await self.sender.send(channel, chat_id, message)
            except DeliveryError as exc:
                logger.error(
                    "Failed to send notification to channel",
                    channel=channel,
                    project=project,
                    error=str(exc),
                )
                continue
            delivered.append(channel)
        return delivered
