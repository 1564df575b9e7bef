"""FastAPI application factory."""

from typing import Any, Callable, Optional

from fastapi import FastAPI

from pumpbridge.adapters.web.webhook_routes import create_webhook_router
from pumpbridge.config import __version__
from pumpbridge.domain.bridge import BridgeController


def create_app(
    controller: BridgeController,
    webhook_path: str = "/tg/webhook",
    test_path: str = "/tg/test",
    lifespan: Optional[Callable[[FastAPI], Any]] = None,
) -> FastAPI:
    app = FastAPI(title="pumpbridge", version=__version__, lifespan=lifespan)
    app.state.controller = controller
    app.include_router(create_webhook_router(webhook_path, test_path))
    return app
