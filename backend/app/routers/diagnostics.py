"""
Email diagnostics router — check provider setup without submitting feedback.

GET  /diagnostics/email       — which providers are configured (masked)
POST /diagnostics/email/test  — push a sample notification through the chain

Neither endpoint touches the database.
"""

import datetime
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.keys import masked
from app.core.config import settings
from app.schemas.notifications import EmailConfigOut, EmailSendResultOut, ProviderStatusOut
from app.services.email_content import FeedbackEmailData
from app.services.notifications import (
    NotificationDispatcher,
    get_notification_dispatcher,
    send_feedback_notification,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Diagnostics"])

Dispatcher = Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)]


@router.get(
    "/email",
    response_model=EmailConfigOut,
    summary="Email provider configuration status",
)
async def get_email_config() -> EmailConfigOut:
    providers = [
        ProviderStatusOut(
            name="Brevo",
            configured=bool(settings.BREVO_API_KEY),
            api_key=masked(settings.BREVO_API_KEY),
            sender_email=settings.BREVO_SENDER_EMAIL,
        ),
        ProviderStatusOut(
            name="Resend",
            configured=bool(settings.RESEND_API_KEY),
            api_key=masked(settings.RESEND_API_KEY),
            sender_email=settings.RESEND_SENDER_EMAIL,
        ),
    ]
    return EmailConfigOut(
        ready=bool(settings.NOTIFICATION_EMAIL) and any(p.configured for p in providers),
        recipient=settings.NOTIFICATION_EMAIL or "NOT SET",
        dashboard_base_url=settings.DASHBOARD_BASE_URL or "NOT SET",
        providers=providers,
    )


@router.post(
    "/email/test",
    response_model=EmailSendResultOut,
    summary="Send a test notification email",
    description=(
        "Renders a sample feedback notification and dispatches it through "
        "the provider chain. Returns which provider delivered it, or the "
        "last provider's error."
    ),
)
async def send_test_email(dispatcher: Dispatcher) -> EmailSendResultOut:
    if not settings.NOTIFICATION_EMAIL:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="NOTIFICATION_EMAIL is not configured",
        )

    now = datetime.datetime.now(datetime.timezone.utc)
    feedback_id = f"test-{int(now.timestamp())}"
    base_url = settings.DASHBOARD_BASE_URL.rstrip("/")

    data = FeedbackEmailData(
        project_name="Test Project",
        project_domain="https://example.com",
        feedback_id=feedback_id,
        message="This is a test email to verify email configuration.",
        created_at=now,
        submitter_name="Test User",
        submitter_email="test@example.com",
        rating=5,
        dashboard_url=f"{base_url}/dashboard/feedback/test" if base_url else None,
    )

    result = await send_feedback_notification(dispatcher, data, settings.NOTIFICATION_EMAIL)
    logger.info("Test email result: success=%s provider=%s", result.success, result.provider)
    return EmailSendResultOut(**result.to_dict())
