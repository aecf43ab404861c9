"""Channel name → renderer lookup."""

from __future__ import annotations

from typing import Optional

import structlog

from notifier.schemas import WebhookPayload
from notifier.services.renderers import Renderer, render_default

logger = structlog.get_logger()


class FormatterRegistry:
    """
    Pick the renderer for a delivery channel.

    Channels without a registered renderer get :func:`render_default`.
    Registration is meant to happen once during start-up; afterwards the
    mapping is only read.
    """

    def __init__(self, default: Renderer = render_default) -> None:
        self._default = default
        self._renderers: dict[str, Renderer] = {}

    def register(self, channel: str, renderer: Optional[Renderer]) -> None:
        if not channel or renderer is None:
            return
        self._renderers[channel] = renderer

    def renderer_for(self, channel: str) -> Renderer:
        return self._renderers.get(channel, self._default)

    def format(self, payload: WebhookPayload, channel: str) -> str:
        renderer = self.renderer_for(channel)
        try:
            return renderer(payload)
        except Exception:
            if renderer is self._default:
                raise
            logger.exception("Channel renderer failed, using default", channel=channel)
        return self._default(payload)
