"""
HTTP email delivery providers.

Each provider owns its base URL, its credential, and the shape of its
request payload. All of them expose the same surface:

    name: str
    async send(to, subject, html, text=None) -> message id

and raise ProviderError on failure, so the dispatcher can treat them as
interchangeable links of one fallback chain.

Configuration (server-side only):
  BREVO_API_KEY, BREVO_SENDER_EMAIL, BREVO_SENDER_NAME
  RESEND_API_KEY (or RESEND_TOKEN), RESEND_SENDER_EMAIL
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

_BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"
_RESEND_API_URL = "https://api.resend.com/emails"

# Response bodies are truncated before they reach messages and logs.
_MAX_BODY_CHARS = 500


class ProviderError(Exception):
    """A single provider could not deliver the message."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ProviderConfigurationError(ProviderError):
    """A required credential is missing. Raised before any network call."""


class EmailProvider(Protocol):
    name: str

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> str: ...


class _HttpEmailProvider:
    """Shared POST + error translation for JSON email APIs."""

    name = "http"
    url = ""

    def __init__(
        self,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        # Injected client is used as-is (tests pass one with a MockTransport).
        self._client = client

    def _require(self, value: str, env_name: str) -> str:
        if not value:
            raise ProviderConfigurationError(
                f"{env_name} environment variable is not set"
            )
        return value

    async def _post(self, payload: dict[str, Any], headers: dict[str, str]) -> dict[str, Any]:
        headers = {"Content-Type": "application/json", **headers}

        if self._client is not None:
            response = await self._client.post(self.url, json=payload, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload, headers=headers)

        if not response.is_success:
            body = response.text[:_MAX_BODY_CHARS]
            raise ProviderError(
                f"{self.name} API error: {response.status_code} - {body}",
                status=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("%s returned a non-JSON success body", self.name)
            return {}
        return data if isinstance(data, dict) else {}


class BrevoProvider(_HttpEmailProvider):
    """Brevo transactional email API (primary)."""

    name = "Brevo"
    url = _BREVO_API_URL

    def __init__(
        self,
        api_key: str,
        sender_email: str,
        sender_name: str = "Feedback Widget",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> str:
        api_key = self._require(self.api_key, "BREVO_API_KEY")

        sender = {"name": self.sender_name, "email": self.sender_email}
        payload: dict[str, Any] = {
            "sender": sender,
            "to": [{"email": to}],
            "subject": subject,
            "htmlContent": html,
            "replyTo": sender,
            "headers": {
                "X-Mailer": "Feedback Widget Email System",
                "Auto-Submitted": "auto-generated",
            },
        }
        if text:
            payload["textContent"] = text

        data = await self._post(payload, {"api-key": api_key})
        return str(data.get("messageId") or data.get("id") or "unknown")


class ResendProvider(_HttpEmailProvider):
    """Resend email API (fallback)."""

    name = "Resend"
    url = _RESEND_API_URL

    def __init__(
        self,
        api_key: str,
        sender_email: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key
        self.sender_email = sender_email

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> str:
        api_key = self._require(self.api_key, "RESEND_API_KEY")

        payload: dict[str, Any] = {
            "from": self.sender_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        data = await self._post(payload, {"Authorization": f"Bearer {api_key}"})
        return str(data.get("id") or "unknown")
