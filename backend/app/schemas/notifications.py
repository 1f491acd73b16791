"""Pydantic v2 schemas for the email diagnostics endpoints."""

from __future__ import annotations

from app.schemas.common import CamelModel


class EmailSendResultOut(CamelModel):
    """Mirror of EmailSendResult for the wire."""

    success: bool
    provider: str | None = None
    message_id: str | None = None
    error: str | None = None


class ProviderStatusOut(CamelModel):
    name: str
    configured: bool
    api_key: str
    sender_email: str


class EmailConfigOut(CamelModel):
    """Which providers can send, with secrets masked."""

    ready: bool
    recipient: str
    dashboard_base_url: str
    providers: list[ProviderStatusOut]
