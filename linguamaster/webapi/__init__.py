"""FastAPI surface for the reader session."""

from .application import create_app

__all__ = ["create_app"]
