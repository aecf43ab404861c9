"""Settings from the environment and per-project routing from YAML."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG_PATH = "./config/config.yml"
DEFAULT_TIMEOUT_SECONDS = 10

CHANNEL_LOGGER = "logger"
CHANNEL_TELEGRAM = "telegram"
CHANNEL_VKTEAMS = "vkteams"
KNOWN_CHANNELS = (CHANNEL_TELEGRAM, CHANNEL_VKTEAMS, CHANNEL_LOGGER)
LAYOUTS = ("inline", "full")


class ConfigError(ValueError):
    """Raised when settings or project configuration are invalid."""


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"invalid {name} format: must be integer (seconds), got: {raw}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got: {value}")
    return value


def _env_layout(name: str) -> str:
    value = os.getenv(name, "inline").strip().lower() or "inline"
    if value not in LAYOUTS:
        raise ConfigError(f"{name} must be one of: {', '.join(LAYOUTS)}, got: {value}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    config_path: str = DEFAULT_CONFIG_PATH
    log_level: str = "info"
    telegram_bot_token: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout: int = DEFAULT_TIMEOUT_SECONDS
    telegram_layout: str = "inline"
    vkteams_bot_token: str = ""
    vkteams_api_url: str = ""
    vkteams_timeout: int = DEFAULT_TIMEOUT_SECONDS
    vkteams_insecure_skip_verify: bool = False
    vkteams_layout: str = "inline"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            config_path=os.getenv("CONFIG_PATH") or DEFAULT_CONFIG_PATH,
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
            telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
            telegram_api_base=os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org"),
            telegram_timeout=_env_int("TELEGRAM_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            telegram_layout=_env_layout("TELEGRAM_LAYOUT"),
            vkteams_bot_token=os.getenv("VKTEAMS_BOT_TOKEN", ""),
            vkteams_api_url=os.getenv("VKTEAMS_API_URL", ""),
            vkteams_timeout=_env_int("VKTEAMS_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            vkteams_insecure_skip_verify=_env_bool("VKTEAMS_INSECURE_SKIP_VERIFY"),
            vkteams_layout=_env_layout("VKTEAMS_LAYOUT"),
        )


@dataclass(frozen=True)
class ProjectConfig:
    """Notification routing for one YouTrack project."""

    allowed_channels: tuple[str, ...] = ()
    telegram_chat_id: Optional[str] = None
    vkteams_chat_id: Optional[str] = None


def _chat_id(section: Any) -> Optional[str]:
    if not isinstance(section, Mapping):
        return None
    value = section.get("chat_id")
    return str(value) if value not in (None, "") else None


def parse_projects(data: Any) -> dict[str, ProjectConfig]:
    """
    Build project configs from a parsed YAML document.

    Keys are normalized to lower case so lookups by YouTrack project name
    are case-insensitive.
    """
    if not isinstance(data, Mapping):
        return {}
    projects: Any = data
    for key in ("notifications", "youtrack", "projects"):
        projects = projects.get(key) if isinstance(projects, Mapping) else None
    if projects is None:
        return {}
    if not isinstance(projects, Mapping):
        raise ConfigError("notifications.youtrack.projects must be a mapping")

    result: dict[str, ProjectConfig] = {}
    for name, raw in projects.items():
        raw = raw if isinstance(raw, Mapping) else {}
        channels = raw.get("allowedChannels") or []
        if isinstance(channels, str):
            channels = [channels]
        result[str(name).lower()] = ProjectConfig(
            allowed_channels=tuple(str(c) for c in channels),
            telegram_chat_id=_chat_id(raw.get("telegram")),
            vkteams_chat_id=_chat_id(raw.get("vkteams")),
        )
    return result


def load_projects(path: str | Path) -> dict[str, ProjectConfig]:
    """Read project routing from ``path``; a missing file means no projects."""
    file = Path(path)
    if not file.exists():
        return {}
    try:
        data = yaml.safe_load(file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse YAML {file}: {exc}") from exc
    return parse_projects(data)


def validate_projects(projects: Mapping[str, ProjectConfig], settings: Settings) -> None:
    """Raise :class:`ConfigError` for the first inconsistent project."""
    for name, project in projects.items():
        if not project.allowed_channels:
            raise ConfigError(f"project {name!r}: allowedChannels cannot be empty")
        for channel in project.allowed_channels:
            if channel not in KNOWN_CHANNELS:
                raise ConfigError(
                    f"project {name!r}: invalid channel {channel!r}, "
                    f"allowed channels: {', '.join(KNOWN_CHANNELS)}"
                )
        if CHANNEL_TELEGRAM in project.allowed_channels:
            if not project.telegram_chat_id:
                raise ConfigError(
                    f"project {name!r}: telegram.chat_id is required when telegram is in allowedChannels"
                )
            if not settings.telegram_bot_token:
                raise ConfigError("TELEGRAM_BOT_TOKEN is required when telegram is used in project configurations")
        if CHANNEL_VKTEAMS in project.allowed_channels:
            if not project.vkteams_chat_id:
                raise ConfigError(
                    f"project {name!r}: vkteams.chat_id is required when vkteams is in allowedChannels"
                )
            if not settings.vkteams_bot_token:
                raise ConfigError("VKTEAMS_BOT_TOKEN is required when vkteams is used in project configurations")
            if not settings.vkteams_api_url:
                raise ConfigError("VKTEAMS_API_URL is required when vkteams is used in project configurations")
