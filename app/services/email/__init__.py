from app.services.email.backend import EmailBackend, LoggingEmailBackend, ResendBackend
from app.services.email.templates import render_notification_email, render_verification_email

__all__ = [
    "EmailBackend",
    "LoggingEmailBackend",
    "ResendBackend",
    "render_notification_email",
    "render_verification_email",
]
