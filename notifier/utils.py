"""the beautiful world start from here."""

from __future__ import annotations

from typing import Iterable


class DeliveryError(RuntimeError):
    """Raised when a notification could not be handed to a messaging backend."""


def normalize_newlines(s: str) -> str:
    return (s or "").replace("\r\n", "\n").replace("\r", "\n")


def split_text(text: str, limit: int = 4096) -> Iterable[str]:
    """Split text into chunks of at most ``limit`` chars, preferring line breaks."""
    t = text or ""
    while len(t) > limit:
        cut = t.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        yield t[:cut]
        t = t[cut + 1 :] if t[cut : cut + 1] == "\n" else t[cut:]
    if t:
        yield t
