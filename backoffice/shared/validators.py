"""Shared validation utilities"""

import re
from typing import Optional

from ..config import DEFAULT_PHONE_COUNTRY_CODE


def format_phone_number(phone: Optional[str], country_code: str = DEFAULT_PHONE_COUNTRY_CODE) -> Optional[str]:
    """
    Normalize a stored phone number to E.164 format.

    Args:
        phone: Phone number string in various formats
        country_code: Prefix used when the number has no leading "+"

    Returns:
        Phone number such as +441234567890, or the input unchanged when empty
    """
    if not phone:
        return phone

    # Remove everything except digits and "+"
    cleaned = re.sub(r"[^\d+]", "", phone)

    if not cleaned.startswith("+"):
        cleaned = f"{country_code}{cleaned}"

    return cleaned


def has_phone_digits(phone: Optional[str]) -> bool:
    """True when the stored number contains at least one digit"""
    return bool(phone) and re.search(r"\d", phone) is not None


def whatsapp_address(phone: str) -> str:
    """Prefix an E.164 number with the WhatsApp channel scheme"""
    if phone.startswith("whatsapp:"):
        return phone
    return f"whatsapp:{phone}"

