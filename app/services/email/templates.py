"""HTML bodies for verification and notification emails.

Rendering is pure: each variant maps to a subject and an HTML body. Every
interpolated value is HTML-escaped.
"""

from html import escape

from app.schemas.email import (
    EmailChangeEmail,
    NewFeaturesData,
    NewFeaturesEmail,
    PasswordResetEmail,
    PromptCompletedData,
    PromptCompletedEmail,
    RenderedEmail,
    SignupEmail,
    WeeklyDigestData,
    WeeklyDigestEmail,
)

DEFAULT_APP_URL = "https://promptekai.com"
DEFAULT_FEATURE_DESCRIPTION = "We've added exciting new features to improve your experience."

_WRAPPER = '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'
_SIGNATURE = '<p style="color: #666; font-size: 12px; margin-top: 30px;">Best regards,<br>The PrompTek Team</p>'
_CODE_BLOCK = (
    '<div style="background-color: #f4f4f4; padding: 20px; text-align: center; margin: 20px 0;">'
    '<h2 style="color: #2563eb; letter-spacing: 5px; font-size: 32px; margin: 0;">{code}</h2>'
    "</div>"
)
_PANEL = '<div style="background-color: #f9f9f9; padding: 15px;{accent} margin: 20px 0;">{content}</div>'
_BUTTON = (
    '<a href="{url}" style="display: inline-block; background-color: #2563eb; color: white; '
    'padding: 12px 24px; text-decoration: none; border-radius: 6px; margin-top: 10px;">{label}</a>'
)
_ACCENT = " border-left: 4px solid #2563eb;"

_VERIFICATION_COPY = {
    "signup": (
        "Welcome to PrompTek - Verify Your Email",
        "Welcome to PrompTek!",
        "Thank you for signing up. Please use the verification code below to complete your registration:",
        "If you didn't request this, please ignore this email.",
    ),
    "password_reset": (
        "PrompTek - Password Reset Code",
        "Password Reset Request",
        "You requested to reset your password. Use the code below to proceed:",
        "If you didn't request this, please ignore this email and your password will remain unchanged.",
    ),
    "email_change": (
        "PrompTek - Verify Your New Email",
        "Email Change Verification",
        "You requested to change your email address. Use the code below to verify your new email:",
        "If you didn't request this, please ignore this email.",
    ),
}


def _page(*parts: str) -> str:
    return _WRAPPER.format(body="".join(parts))


def _heading(text: str) -> str:
    return f'<h1 style="color: #333;">{text}</h1>'


def _paragraph(text: str) -> str:
    return f"<p>{text}</p>"


def _field(label: str, value: object) -> str:
    return f"<p><strong>{label}:</strong> {escape(str(value))}</p>"


def _button(url: str | None, label: str, default_url: str) -> str:
    return _BUTTON.format(url=escape(url or default_url, quote=True), label=label)


def render_verification_email(
    message: SignupEmail | PasswordResetEmail | EmailChangeEmail,
) -> RenderedEmail:
    subject, title, intro, footer = _VERIFICATION_COPY[message.type]
    html = _page(
        _heading(title),
        _paragraph(intro),
        _CODE_BLOCK.format(code=escape(message.code)),
        _paragraph("This code will expire in 10 minutes."),
        _paragraph(footer),
        _SIGNATURE,
    )
    return RenderedEmail(subject=subject, html=html)


def _render_prompt_completed(data: PromptCompletedData, app_url: str) -> str:
    return _page(
        _heading("Your Prompt Optimization is Complete!"),
        _paragraph("We've finished optimizing your prompt. Here are the results:"),
        _PANEL.format(
            accent=_ACCENT,
            content=_field("Original Prompt", data.original_prompt or "N/A")
            + _field("Best Score", data.best_score if data.best_score is not None else "N/A"),
        ),
        _paragraph("Log in to view the full results and optimized variants."),
        _button(data.app_url, "View Results", app_url),
        _SIGNATURE,
    )


def _render_weekly_digest(data: WeeklyDigestData, app_url: str) -> str:
    return _page(
        _heading("Your Weekly PrompTek Summary"),
        _paragraph("Here's what happened this week:"),
        _PANEL.format(
            accent="",
            content=_field("Prompts Optimized", data.prompts_count)
            + _field("Templates Used", data.templates_used)
            + _field("Average Score", data.avg_score if data.avg_score is not None else "N/A"),
        ),
        _button(data.app_url, "View Dashboard", app_url),
        _SIGNATURE,
    )


def _render_new_features(data: NewFeaturesData, app_url: str) -> str:
    features = "".join(f"<p>✓ {escape(feature)}</p>" for feature in data.features)
    return _page(
        _heading("🎉 New Features in PrompTek!"),
        _paragraph(escape(data.feature_description or DEFAULT_FEATURE_DESCRIPTION)),
        _PANEL.format(accent=_ACCENT, content=features),
        _button(data.app_url, "Try It Now", app_url),
        _SIGNATURE,
    )


def render_notification_email(
    message: PromptCompletedEmail | WeeklyDigestEmail | NewFeaturesEmail,
    app_url: str = DEFAULT_APP_URL,
) -> RenderedEmail:
    """Render a notification; the subject is the caller's, the body depends on the variant."""
    if isinstance(message, PromptCompletedEmail):
        html = _render_prompt_completed(message.data or PromptCompletedData(), app_url)
    elif isinstance(message, WeeklyDigestEmail):
        html = _render_weekly_digest(message.data or WeeklyDigestData(), app_url)
    elif isinstance(message, NewFeaturesEmail):
        html = _render_new_features(message.data or NewFeaturesData(), app_url)
    else:
        raise TypeError(f"Unsupported notification type: {type(message).__name__}")
    return RenderedEmail(subject=message.subject, html=html)
