import html
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_multiline(value: Optional[str]) -> str:
    """Escape a free-text block and keep its line breaks for HTML bodies"""
    if not value:
        return ""
    return sanitize_string(value).replace("\n", "<br>")
