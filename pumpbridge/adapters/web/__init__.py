"""HTTP adapter (FastAPI)."""

from pumpbridge.adapters.web.server import create_app

__all__ = ["create_app"]
