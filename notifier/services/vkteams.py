"""VK Teams bot API client."""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from notifier.utils import DeliveryError, normalize_newlines

SEND_TEXT_ENDPOINT = "/messages/sendText"
HTTP_TIMEOUT_SECONDS = 10
PARSE_MODE = "MarkdownV2"

logger = structlog.get_logger()


async def send_text(
    api_url: str,
    token: str,
    chat_id: str,
    text: str,
    *,
    timeout: float = HTTP_TIMEOUT_SECONDS,
    verify: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[str, Any]:
    """
    Send a text message through ``GET <api_url>/messages/sendText``.

    VK Teams answers ``200`` with ``{"ok": false, ...}`` for logical errors,
    so both the status and the ``ok`` flag are checked.
    """
    if not api_url:
        raise DeliveryError("vkteams API URL is not configured")
    if not chat_id:
        raise DeliveryError("vkteams chat ID is not configured")

    url = api_url.rstrip("/") + SEND_TEXT_ENDPOINT
    params = {
        "token": token,
        "chatId": chat_id,
        "text": normalize_newlines(text),
        "parseMode": PARSE_MODE,
    }
    async with httpx.AsyncClient(timeout=timeout, verify=verify, transport=transport) as client:
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Failed to send VK Teams message", error=str(exc))
            raise DeliveryError(f"failed to send message: {exc}") from exc

    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    if resp.status_code != 200 or not data.get("ok", True):
        logger.error(
            "VK Teams API returned error",
            status_code=resp.status_code,
            response=resp.text,
        )
        raise DeliveryError(f"vkteams API error: status {resp.status_code}, response: {resp.text}")
    return data
