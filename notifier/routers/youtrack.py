"""Router YouTrack"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from notifier.schemas import PayloadError, parse_payload

router = APIRouter(prefix="/webhook", tags=["youtrack"])

logger = structlog.get_logger()


@router.post("/youtrack", response_class=PlainTextResponse)
async def youtrack_webhook(request: Request) -> str:
    """
    YouTrack workflow webhook endpoint.

    The body is decoded into a payload, formatted per allowed channel of the
    payload's project and delivered. Unknown projects are acknowledged and
    ignored; only an undecodable body is rejected with ``400``.
    """
    body = await request.body()
    logger.debug(
        "Webhook received",
        method=request.method,
        path=request.url.path,
        body=body.decode("utf-8", errors="replace"),
    )
    try:
        payload = parse_payload(body)
    except PayloadError as exc:
        logger.error("Failed to parse YouTrack data", error=str(exc))
        raise HTTPException(400, "Failed to process webhook") from exc

    await request.app.state.webhook_service.process(payload)
    return "ok"
