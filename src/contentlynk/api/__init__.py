# src/contentlynk/api/__init__.py
"""HTTP API for ContentLynk."""

from .router import api_router

__all__ = ["api_router"]
