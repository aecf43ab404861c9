"""Yet another tele services"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from notifier.utils import DeliveryError, normalize_newlines, split_text

TELEGRAM_API_BASE = "https://api.telegram.org"
HTTP_TIMEOUT_SECONDS = 10
MESSAGE_LIMIT = 4096
PARSE_MODE = "MarkdownV2"

JSONDict = dict[str, Any]

logger = structlog.get_logger()


def _check(resp: httpx.Response) -> JSONDict:
    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    if resp.status_code >= 300 or not data.get("ok", True):
        logger.error(
            "Telegram API returned error",
            status_code=resp.status_code,
            response=resp.text,
        )
        raise DeliveryError(f"telegram API error: status {resp.status_code}, response: {resp.text}")
    return data


async def send_message(
    token: str,
    chat_id: int | str,
    text: str,
    *,
    api_base: str = TELEGRAM_API_BASE,
    timeout: float = HTTP_TIMEOUT_SECONDS,
    auto_split: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[JSONDict]:
    """Send a MarkdownV2 message, split into 4096-char chunks when needed."""
    if not token:
        raise DeliveryError("telegram bot token is not configured")
    if not chat_id:
        raise DeliveryError("telegram chat ID is not configured")

    api = f"{api_base.rstrip('/')}/bot{token}/sendMessage"
    rendered = normalize_newlines(text)
    chunks = list(split_text(rendered, MESSAGE_LIMIT)) if auto_split else [rendered]

    results: list[JSONDict] = []
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        for chunk in chunks:
            payload: JSONDict = {
                "chat_id": chat_id,
                "text": chunk,
                "parse_mode": PARSE_MODE,
            }
            try:
                resp = await client.post(api, json=payload)
            except httpx.HTTPError as exc:
                logger.error("Failed to send Telegram message", error=str(exc))
                raise DeliveryError(f"failed to send message: {exc}") from exc
            results.append(_check(resp))
    return results
