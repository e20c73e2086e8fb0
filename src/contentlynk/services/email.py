"""Transactional e-mail delivery through the Resend HTTP API.

Sending never raises into request handlers. Every call returns an
``EmailResult`` and failures are logged, because an e-mail that cannot be
delivered must not undo the database change that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from contentlynk.core.settings import settings

logger = logging.getLogger(__name__)

DEV_MESSAGE_ID = "dev-mode"


@dataclass(frozen=True)
class EmailConfig:
    """Immutable configuration for the e-mail client."""

    api_key: str | None
    api_url: str
    sender: str
    timeout_seconds: float
    dev_mode: bool


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str | None = None


@dataclass(frozen=True)
class EmailResult:
    """Delivery outcome; ``message_id`` is the provider id on success."""

    success: bool
    message_id: str | None = None
    error: str | None = None


def load_email_config() -> EmailConfig:
    """Build configuration object from global settings."""

    return EmailConfig(
        api_key=settings.resend_api_key,
        api_url=settings.resend_api_url,
        sender=settings.email_from,
        timeout_seconds=float(settings.email_timeout_seconds),
        dev_mode=settings.debug,
    )


class EmailService:
    """Async wrapper around the Resend ``POST /emails`` endpoint."""

    def __init__(
        self,
        config: EmailConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_email_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.api_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    headers={"Authorization": f"Bearer {self.config.api_key}"},
                    transport=self._transport,
                )
        return self._client

    async def send(self, message: EmailMessage) -> EmailResult:
        """Deliver ``message``.

        Without an API key the message is only logged in debug mode and
        reported as sent; otherwise the send fails as not configured.
        """
        if not self.configured:
            if self.config.dev_mode:
                logger.info(
                    "Email service not configured, would send %r to %s",
                    message.subject,
                    message.to,
                )
                return EmailResult(success=True, message_id=DEV_MESSAGE_ID)
            logger.error("RESEND_API_KEY not configured, dropping e-mail to %s", message.to)
            return EmailResult(success=False, error="Email service not configured")

        payload: dict[str, object] = {
            "from": self.config.sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        if message.text:
            payload["text"] = message.text

        try:
            client = await self._ensure_client()
            response = await client.post("/emails", json=payload)
        except httpx.HTTPError as exc:
            logger.error("E-mail request to %s failed: %s", message.to, exc)
            return EmailResult(success=False, error=str(exc))

        if response.status_code >= 400:
            error = _error_message(response)
            logger.error("E-mail provider rejected message to %s: %s", message.to, error)
            return EmailResult(success=False, error=error)

        message_id = response.json().get("id")
        logger.info("E-mail sent to %s (%s)", message.to, message_id)
        return EmailResult(success=True, message_id=message_id)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Return the process-wide e-mail service."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
