"""
Email Service using Resend
Sends pre-rendered HTML/plain-text messages
"""

import logging
from typing import Optional, Union

import resend

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .services.notification_service import DeliveryResult

logger = logging.getLogger(__name__)


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    html: str,
    text: Optional[str] = None,
    from_address: Optional[str] = None,
    api_key: Optional[str] = None,
) -> DeliveryResult:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        html: HTML body
        text: Optional plain-text alternative
        from_address: Optional custom from address
        api_key: Resend API key, defaults to RESEND_API_KEY

    Returns:
        DeliveryResult carrying the Resend email id on success
    """
    key = api_key or RESEND_API_KEY
    if not key:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        return DeliveryResult(success=False, error="Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    email_data = {
        "from": from_address or EMAIL_FROM_ADDRESS,
        "to": recipients,
        "subject": subject,
        "html": html,
    }
    if text:
        email_data["text"] = text

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        resend.api_key = key
        response = resend.Emails.send(email_data)
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        return DeliveryResult(success=False, error=str(e) or "Failed to send email")

    message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
    logger.info(f"✅ Email sent successfully via Resend: {message_id}")
    return DeliveryResult(success=True, message_id=message_id)
