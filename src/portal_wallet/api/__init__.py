"""FastAPI surface for the Portal wallet backend."""

from .main import create_app

__all__ = ["create_app"]
