# src/contentlynk/services/__init__.py
"""Business logic services for the ContentLynk application."""

from .email import EmailService
from .storage import StorageService

__all__ = [
    "EmailService",
    "StorageService",
]
