"""
Notification dispatcher — one logical email, an ordered chain of providers.

Algorithm:
  1. Try providers in fixed priority order (Brevo, then Resend).
  2. First success wins; the remaining providers are NOT attempted.
  3. A failing provider is logged with its name and skipped.
  4. If every provider fails, the result carries the LAST error only;
     earlier failures are visible in the logs.

Delivery is at-most-one-provider-per-attempt and nothing is retried later.
If every provider is down the notification is dropped;
the feedback row itself is already committed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass

from app.core.config import Settings, settings
from app.services.email_content import FeedbackEmailData, build_feedback_email
from app.services.email_providers import BrevoProvider, EmailProvider, ResendProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmailSendResult:
    """Outcome of one dispatch. Never stored."""

    success: bool
    provider: str | None = None
    message_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


class NotificationDispatcher:
    """Sequential first-success-wins delivery over a provider chain."""

    def __init__(self, providers: Sequence[EmailProvider]) -> None:
        self.providers = list(providers)

    async def dispatch(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> EmailSendResult:
        """Deliver through the first provider that accepts the message. Never raises."""
        last_error = "No email providers configured"

        for provider in self.providers:
            try:
                message_id = await provider.send(to, subject, html, text)
            except Exception as exc:
                last_error = str(exc) or exc.__class__.__name__
                logger.warning("%s email send failed: %s", provider.name, last_error)
                continue

            logger.info("Email sent via %s (message_id=%s)", provider.name, message_id)
            return EmailSendResult(
                success=True,
                provider=provider.name,
                message_id=message_id,
            )

        logger.error("All email providers failed; last error: %s", last_error)
        return EmailSendResult(success=False, error=last_error)


def build_default_dispatcher(config: Settings) -> NotificationDispatcher:
    """Brevo first, Resend as fallback."""
    return NotificationDispatcher([
        BrevoProvider(
            api_key=config.BREVO_API_KEY,
            sender_email=config.BREVO_SENDER_EMAIL,
            sender_name=config.BREVO_SENDER_NAME,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
        ),
        ResendProvider(
            api_key=config.RESEND_API_KEY,
            sender_email=config.RESEND_SENDER_EMAIL,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
        ),
    ])


def get_notification_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency — overridden with fake providers in tests."""
    return build_default_dispatcher(settings)


async def send_feedback_notification(
    dispatcher: NotificationDispatcher,
    data: FeedbackEmailData,
    recipient: str,
) -> EmailSendResult:
    """Render the feedback email and hand it to the dispatcher."""
    email = build_feedback_email(data)
    return await dispatcher.dispatch(recipient, email.subject, email.html, email.text)


async def notify_new_feedback(
    dispatcher: NotificationDispatcher,
    data: FeedbackEmailData,
    recipient: str,
) -> EmailSendResult | None:
    """
    Fire-and-forget wrapper run as a background task after ingestion.

    The outcome only reaches the logs. Nothing here may raise: a broken
    template or provider must not surface as a failed submission.
    """
    if not recipient:
        logger.warning(
            "NOTIFICATION_EMAIL is not set; skipping email for feedback %s",
            data.feedback_id,
        )
        return None

    try:
        result = await send_feedback_notification(dispatcher, data, recipient)
    except Exception:
        logger.exception("Notification for feedback %s failed (non-fatal)", data.feedback_id)
        return None

    if result.success:
        logger.info(
            "Notification for feedback %s sent via %s",
            data.feedback_id,
            result.provider,
        )
    else:
        logger.error(
            "Notification for feedback %s was dropped: %s",
            data.feedback_id,
            result.error,
        )
    return result
