import structlog
from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_email_backend
from app.schemas.email import EmailSendResponse, NotificationEmailRequest, VerificationEmailRequest
from app.services.email.backend import EmailBackend
from app.services.email.templates import render_notification_email, render_verification_email

logger = structlog.get_logger()

router = APIRouter()


@router.post("/send-verification-email")
async def send_verification_email(
    payload: VerificationEmailRequest,
    backend: EmailBackend = Depends(get_email_backend),
) -> EmailSendResponse:
    """Send a signup, password-reset or email-change code."""
    message = payload.root
    rendered = render_verification_email(message)
    message_id = await backend.send(
        to=message.email,
        subject=rendered.subject,
        html=rendered.html,
        sender=settings.promptek_verification_sender,
    )
    logger.info("verification_email_sent", type=message.type, id=message_id)
    return EmailSendResponse(id=message_id)


@router.post("/send-notification-email")
async def send_notification_email(
    payload: NotificationEmailRequest,
    backend: EmailBackend = Depends(get_email_backend),
) -> EmailSendResponse:
    """Send a prompt-completed, weekly-digest or new-features notification."""
    message = payload.root
    rendered = render_notification_email(message, app_url=settings.promptek_app_url)
    message_id = await backend.send(
        to=message.email,
        subject=rendered.subject,
        html=rendered.html,
        sender=settings.promptek_notification_sender,
    )
    logger.info("notification_email_sent", type=message.type, id=message_id)
    return EmailSendResponse(id=message_id)
