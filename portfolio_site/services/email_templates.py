"""HTML and plain-text bodies for the contact relay emails.

Every visitor-supplied value goes through ``html.escape`` before it is placed
in markup.
"""
from __future__ import annotations

from datetime import datetime
from html import escape

from portfolio_site.core.email_config import email_config
from portfolio_site.schemas.contact import ContactRequest

_FRAME_STYLE = (
    "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; "
    "padding: 20px; border: 1px solid #e0e0e0; border-radius: 10px;"
)


def message_excerpt(message: str, length: int | None = None) -> str:
    length = length or email_config.AUTO_REPLY_EXCERPT_LENGTH
    if len(message) > length:
        return message[:length] + "..."
    return message


def format_sent_at(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _html_lines(text: str) -> str:
    return escape(text).replace("\n", "<br>")


def render_notification_html(request: ContactRequest) -> str:
    accent = email_config.ACCENT_COLOR
    return f"""\
<div style="{_FRAME_STYLE}">
    <h2 style="color: #333; border-bottom: 2px solid {accent}; padding-bottom: 10px;">New Portfolio Contact</h2>

    <div style="margin: 20px 0; padding: 15px; background-color: #f8f9fa; border-radius: 5px;">
        <p><strong style="color: {accent};">Name:</strong> {escape(request.name)}</p>
        <p><strong style="color: {accent};">Email:</strong> {escape(request.email)}</p>
        <p><strong style="color: {accent};">Subject:</strong> {escape(request.subject)}</p>
    </div>

    <div style="margin: 20px 0;">
        <h3 style="color: #333; margin-bottom: 10px;">Message:</h3>
        <div style="padding: 15px; background-color: #ffffff; border: 1px solid #e0e0e0; border-radius: 5px; line-height: 1.6;">
            {_html_lines(request.message)}
        </div>
    </div>

    <div style="margin-top: 20px; padding: 15px; background-color: #e8f4f8; border-radius: 5px; font-size: 12px; color: #666;">
        <p><strong>Sent:</strong> {escape(format_sent_at(request.received_at))}</p>
        <p><strong>From:</strong> {escape(email_config.NOTIFICATION_ORIGIN)}</p>
    </div>
</div>
"""


def render_notification_text(request: ContactRequest) -> str:
    return "\n".join(
        [
            "New Portfolio Contact",
            f"Name: {request.name}",
            f"Email: {request.email}",
            f"Subject: {request.subject}",
            "",
            "Message:",
            request.message,
            "",
            f"Sent: {format_sent_at(request.received_at)}",
            f"From: {email_config.NOTIFICATION_ORIGIN}",
        ]
    )


def render_auto_reply_html(request: ContactRequest) -> str:
    cfg = email_config
    accent = cfg.ACCENT_COLOR
    return f"""\
<div style="{_FRAME_STYLE}">
    <h2 style="color: {accent}; text-align: center; margin-bottom: 20px;">Thank You for Reaching Out!</h2>

    <div style="text-align: center; margin: 20px 0;">
        <img src="{cfg.OWNER_AVATAR_URL}" alt="{escape(cfg.OWNER_NAME)}" style="border-radius: 50%; width: 100px; height: 100px;">
    </div>

    <p style="color: #333; line-height: 1.6;">Hi <strong>{escape(request.name)}</strong>,</p>

    <p style="color: #333; line-height: 1.6;">
        Thank you for taking the time to contact me! I've received your message and I'm excited to connect with you.
    </p>

    <div style="background-color: #f8f9fa; padding: 15px; border-radius: 5px; margin: 20px 0;">
        <h3 style="color: {accent}; margin-top: 0;">Your message summary:</h3>
        <p><strong>Subject:</strong> {escape(request.subject)}</p>
        <p style="font-style: italic;">"{escape(message_excerpt(request.message))}"</p>
    </div>

    <p style="color: #333; line-height: 1.6;">
        I typically respond to messages within <strong>{cfg.AUTO_REPLY_RESPONSE_TIME}</strong>. If your inquiry is urgent,
        feel free to connect with me on LinkedIn or check out my latest projects on GitHub.
    </p>

    <div style="text-align: center; margin: 30px 0;">
        <a href="{cfg.LINKEDIN_URL}" style="display: inline-block; margin: 0 10px; padding: 10px 20px; background-color: #0077b5; color: white; text-decoration: none; border-radius: 5px;">LinkedIn</a>
        <a href="{cfg.GITHUB_URL}" style="display: inline-block; margin: 0 10px; padding: 10px 20px; background-color: #333; color: white; text-decoration: none; border-radius: 5px;">GitHub</a>
    </div>

    <p style="color: #333; line-height: 1.6;">Looking forward to our conversation!</p>

    <p style="color: #333; line-height: 1.6;">
        Best regards,<br>
        <strong>{escape(cfg.OWNER_NAME)}</strong><br>
        <span style="color: #666;">{escape(cfg.OWNER_TITLE)}</span>
    </p>

    <div style="border-top: 1px solid #e0e0e0; margin-top: 30px; padding-top: 20px; text-align: center; font-size: 12px; color: #666;">
        <p>This is an automated response. Please do not reply directly to this email.</p>
    </div>
</div>
"""


def render_auto_reply_text(request: ContactRequest) -> str:
    cfg = email_config
    return "\n".join(
        [
            f"Hi {request.name},",
            "",
            "Thank you for taking the time to contact me! I've received your "
            "message and I'm excited to connect with you.",
            "",
            "Your message summary:",
            f"Subject: {request.subject}",
            f'"{message_excerpt(request.message)}"',
            "",
            f"I typically respond to messages within {cfg.AUTO_REPLY_RESPONSE_TIME}.",
            f"LinkedIn: {cfg.LINKEDIN_URL}",
            f"GitHub: {cfg.GITHUB_URL}",
            "",
            "Best regards,",
            cfg.OWNER_NAME,
            cfg.OWNER_TITLE,
            "",
            "This is an automated response. Please do not reply directly to this email.",
        ]
    )
