"""the beautiful world start from here."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import FastAPI

from notifier.config import Settings, load_projects, validate_projects
from notifier.log import configure_logging
from notifier.routers import info, youtrack
from notifier.services.delivery import Sender, build_sender
from notifier.services.projects import ProjectRouter
from notifier.services.webhook import WebhookService, build_registry

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    *,
    sender: Optional[Sender] = None,
    projects: Optional[dict] = None,
) -> FastAPI:
    """
    Wire settings, project routing, renderers and channels into a FastAPI app.

    Everything is built once here; request handlers only read it.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if projects is None:
        projects = load_projects(settings.config_path)
    validate_projects(projects, settings)

    app = FastAPI(title="YouTrack → Telegram / VK Teams notifier")
    app.state.settings = settings
    app.state.webhook_service = WebhookService(
        ProjectRouter(projects),
        build_registry(settings),
        sender or build_sender(settings),
    )
    app.include_router(info.router)
    app.include_router(youtrack.router)

    logger.info("Notifier configured", projects=sorted(projects), log_level=settings.log_level)
    return app


app = create_app()
