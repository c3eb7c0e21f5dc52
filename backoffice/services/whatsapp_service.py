"""
Twilio WhatsApp Service
Sends chat-formatted travel messages through the Twilio Messages API
"""

import logging
from typing import Optional

import httpx

from ..shared.validators import whatsapp_address
from .notification_service import DeliveryResult

logger = logging.getLogger(__name__)


async def send_whatsapp(
    to: str,
    message: str,
    account_sid: str,
    auth_token: str,
    from_number: str,
    base_url: str = "https://api.twilio.com/2010-04-01",
    timeout: float = 10.0,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DeliveryResult:
    """
    Send a WhatsApp message via Twilio

    Args:
        to: Recipient phone number in E.164 format (with or without "whatsapp:")
        message: Message body (WhatsApp markup)
        account_sid: Twilio account SID
        auth_token: Twilio auth token
        from_number: WhatsApp-enabled sender, e.g. whatsapp:+14155238886
        base_url: Twilio REST API root
        timeout: Request timeout in seconds
        http_transport: Optional httpx transport override

    Returns:
        DeliveryResult carrying the Twilio message SID on success
    """
    data = {
        "From": whatsapp_address(from_number),
        "To": whatsapp_address(to),
        "Body": message,
    }

    try:
        logger.info(f"📱 Sending WhatsApp message to {data['To']}")
        async with httpx.AsyncClient(transport=http_transport) as client:
            response = await client.post(
                f"{base_url}/Accounts/{account_sid}/Messages.json",
                auth=(account_sid, auth_token),
                data=data,
                timeout=timeout,
            )

        logger.info(f"📡 Twilio API response status: {response.status_code}")

        if response.status_code in [200, 201]:
            message_sid = response.json().get("sid")
            logger.info(f"✅ WhatsApp message sent successfully (SID: {message_sid})")
            return DeliveryResult(success=True, message_id=message_sid)

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error_message = error_data.get("message") or f"HTTP {response.status_code}"
        error_code = error_data.get("code")
        logger.error(f"❌ Twilio API error [{error_code}]: {error_message}")
        if error_code:
            return DeliveryResult(success=False, error=f"Twilio error {error_code}: {error_message}")
        return DeliveryResult(success=False, error=error_message)

    except httpx.HTTPError as e:
        logger.error(f"Twilio API error: {str(e)}")
        return DeliveryResult(success=False, error=str(e) or "Failed to send WhatsApp message")
