"""Transactional notification emails delivered through SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import get_settings

logger = logging.getLogger(__name__)

SENDER_NAME = "DevFlow"


def _describe_sendgrid_body(body: Any) -> str | None:
    """Turn a SendGrid error body into a single readable line."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not body:
        return None

    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        messages = []
        for item in body["errors"]:
            if not isinstance(item, dict) or not item.get("message"):
                continue
            if item.get("help"):
                messages.append(f"{item['message']} (help: {item['help']})")
            else:
                messages.append(str(item["message"]))
        if messages:
            return "; ".join(messages)

    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return str(body)


def _log_sendgrid_failure(source: Any, *, prefix: str) -> None:
    status_code = getattr(source, "status_code", None)
    details = _describe_sendgrid_body(getattr(source, "body", None))

    if status_code and details:
        logger.error("%s with status %s: %s", prefix, status_code, details)
    elif status_code:
        logger.error("%s with status %s", prefix, status_code)
    elif details:
        logger.error("%s: %s", prefix, details)
    elif isinstance(source, Exception):
        logger.error("%s: %s", prefix, source, exc_info=source)
    else:
        logger.error(prefix)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials.

    Returns ``False`` instead of raising when email is not configured or the
    API rejects the message; the reason is logged.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=(settings.sendgrid_sender, SENDER_NAME),
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_failure(exc, prefix="SendGrid API request failed")
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(response, prefix="SendGrid API responded")
        return False

    return True


def render_notification_email(title: str, message: str) -> str:
    """Return the HTML body used for notification emails."""

    frontend_url = get_settings().frontend_url.rstrip("/")
    safe_title = escape(title)
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{safe_title}</title></head>"
        "<body style=\"font-family: Arial, sans-serif; line-height: 1.6; color: #333;\">"
        "<div style=\"max-width: 600px; margin: 0 auto; padding: 20px;\">"
        "<div style=\"background: #3B82F6; color: white; padding: 20px; text-align: center;\">"
        "<h1>DevFlow</h1></div>"
        "<div style=\"padding: 20px; background: #f9f9f9;\">"
        f"<h2>{safe_title}</h2><p>{escape(message)}</p>"
        f"<a href=\"{frontend_url}/dashboard\">View on DevFlow</a></div>"
        "<div style=\"padding: 20px; text-align: center; color: #666;\">"
        "<p>This is an automated notification from DevFlow.</p>"
        f"<p><a href=\"{frontend_url}/settings/notifications\">"
        "Manage notification preferences</a></p>"
        "</div></div></body></html>"
    )


def send_notification_email(email: str, title: str, message: str) -> bool:
    """Send the templated notification email for ``title``/``message``."""

    return send_email(title, render_notification_email(title, message), email)


__all__ = ["render_notification_email", "send_email", "send_notification_email"]
