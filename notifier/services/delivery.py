"""Notification channels and the sender that dispatches to them."""

from __future__ import annotations

from typing import Optional, Protocol

import httpx
import structlog

from notifier.config import CHANNEL_LOGGER, CHANNEL_TELEGRAM, CHANNEL_VKTEAMS, Settings
from notifier.services import telegram, vkteams
from notifier.utils import DeliveryError

logger = structlog.get_logger()


class Channel(Protocol):
    name: str

    async def send(self, chat_id: Optional[str], text: str) -> None: ...


class LoggerChannel:
    """Writes notifications to the log; handy for development."""

    name = CHANNEL_LOGGER

    async def send(self, chat_id: Optional[str], text: str) -> None:
        logger.info("Notification sent via logger channel", message=text)


class TelegramChannel:
    name = CHANNEL_TELEGRAM

    def __init__(
        self,
        token: str,
        *,
        api_base: str = telegram.TELEGRAM_API_BASE,
        timeout: float = telegram.HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not token:
            logger.warning("Telegram bot token is empty, Telegram channel will not work")
        self.token = token
        self.api_base = api_base
        self.timeout = timeout
        self.transport = transport

    async def send(self, chat_id: Optional[str], text: str) -> None:
        await telegram.send_message(
            self.token,
            chat_id or "",
            text,
            api_base=self.api_base,
            timeout=self.timeout,
            transport=self.transport,
        )
        logger.info("Notification sent via Telegram channel", chat_id=chat_id)


class VKTeamsChannel:
    name = CHANNEL_VKTEAMS

    def __init__(
        self,
        token: str,
        api_url: str,
        *,
        timeout: float = vkteams.HTTP_TIMEOUT_SECONDS,
        insecure_skip_verify: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not token:
            logger.warning("VK Teams bot token is empty, VK Teams channel will not work")
        if not api_url:
            logger.error("VK Teams API URL is required, VK Teams channel will not work")
        if insecure_skip_verify:
            logger.warning("VK Teams: SSL certificate verification is disabled")
        self.token = token
        self.api_url = api_url
        self.timeout = timeout
        self.verify = not insecure_skip_verify
        self.transport = transport

    async def send(self, chat_id: Optional[str], text: str) -> None:
        await vkteams.send_text(
            self.api_url,
            self.token,
            chat_id or "",
            text,
            timeout=self.timeout,
            verify=self.verify,
            transport=self.transport,
        )
        logger.info("Notification sent via VK Teams channel", chat_id=chat_id)


class Sender:
    """Routes a formatted message to the channel registered under its name."""

    def __init__(self) -> None:
        self._channels: dict[str, Channel] = {}

    def register(self, channel: Optional[Channel]) -> None:
        if channel is None:
            logger.warning("Attempted to register nil channel")
            return
        if not channel.name:
            logger.warning("Attempted to register channel with empty name")
            return
        self._channels[channel.name] = channel
        logger.info("Notification channel registered", channel=channel.name)

    def channels(self) -> list[str]:
        return sorted(self._channels)

    async def send(self, channel: str, chat_id: Optional[str], text: str) -> None:
        if not text:
            raise DeliveryError("formatted message cannot be empty")
        target = self._channels.get(channel)
        if target is None:
            raise DeliveryError(f"channel {channel!r} is not registered")
        await target.send(chat_id, text)


def build_sender(settings: Settings) -> Sender:
    sender = Sender()
    sender.register(LoggerChannel())
    if settings.telegram_bot_token:
        sender.register(
            TelegramChannel(
                settings.telegram_bot_token,
                api_base=settings.telegram_api_base,
                timeout=settings.telegram_timeout,
            )
        )
    if settings.vkteams_bot_token:
        sender.register(
            VKTeamsChannel(
                settings.vkteams_bot_token,
                settings.vkteams_api_url,
                timeout=settings.vkteams_timeout,
                insecure_skip_verify=settings.vkteams_insecure_skip_verify,
            )
        )
    return sender
