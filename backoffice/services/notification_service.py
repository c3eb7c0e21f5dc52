"""
Unified Notification Transport
Single entry point for email (Resend) and WhatsApp (Twilio) delivery.
Constructed once at startup and handed to whatever needs to send messages.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .. import config
from ..shared.validators import format_phone_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one transport call"""

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class NotificationTransport:
    """Email and WhatsApp delivery with credentials supplied by the caller"""

    def __init__(
        self,
        resend_api_key: Optional[str] = None,
        email_from: Optional[str] = None,
        twilio_account_sid: Optional[str] = None,
        twilio_auth_token: Optional[str] = None,
        whatsapp_from: Optional[str] = None,
        twilio_base_url: str = config.TWILIO_API_BASE_URL,
        twilio_timeout: float = config.TWILIO_TIMEOUT_SECONDS,
        default_country_code: str = config.DEFAULT_PHONE_COUNTRY_CODE,
        http_transport=None,
    ):
        self.resend_api_key = resend_api_key
        self.email_from = email_from
        self.twilio_account_sid = twilio_account_sid
        self.twilio_auth_token = twilio_auth_token
        self.whatsapp_from = whatsapp_from
        self.twilio_base_url = twilio_base_url
        self.twilio_timeout = twilio_timeout
        self.default_country_code = default_country_code
        # Optional httpx transport, used to stub the Twilio API
        self.http_transport = http_transport

    @classmethod
    def from_config(cls) -> "NotificationTransport":
        transport = cls(
            resend_api_key=config.RESEND_API_KEY,
            email_from=config.EMAIL_FROM_ADDRESS,
            twilio_account_sid=config.TWILIO_ACCOUNT_SID,
            twilio_auth_token=config.TWILIO_AUTH_TOKEN,
            whatsapp_from=config.TWILIO_WHATSAPP_FROM,
        )
        logger.info(
            f"📮 Notification transport ready (email={'on' if transport.email_configured else 'off'}, "
            f"whatsapp={'on' if transport.whatsapp_configured else 'off'})"
        )
        return transport

    @property
    def email_configured(self) -> bool:
        return bool(self.resend_api_key and self.email_from)

    @property
    def whatsapp_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.whatsapp_from)

    def format_phone_number(self, raw: str) -> str:
        return format_phone_number(raw, self.default_country_code)

    async def send_email(
        self, to: str, subject: str, html: str, text: Optional[str] = None
    ) -> DeliveryResult:
        from ..email_service import send_email

        if not self.email_configured:
            logger.error("❌ No email service configured - RESEND_API_KEY or EMAIL_FROM_ADDRESS missing")
            return DeliveryResult(success=False, error="Email service not configured")

        return await send_email(
            to=to,
            subject=subject,
            html=html,
            text=text,
            from_address=self.email_from,
            api_key=self.resend_api_key,
        )

    async def send_chat(self, to: str, message: str) -> DeliveryResult:
        from .whatsapp_service import send_whatsapp

        if not self.whatsapp_configured:
            logger.error("❌ Twilio WhatsApp not configured - credentials or sender missing")
            return DeliveryResult(success=False, error="WhatsApp service not configured")

        return await send_whatsapp(
            to=to,
            message=message,
            account_sid=self.twilio_account_sid,
            auth_token=self.twilio_auth_token,
            from_number=self.whatsapp_from,
            base_url=self.twilio_base_url,
            timeout=self.twilio_timeout,
            http_transport=self.http_transport,
        )
