"""Outbound contact links built from stored phone numbers and emails."""

import re
from urllib.parse import quote

WHATSAPP_BASE_URL = "https://wa.me"


def _digits(phone: str) -> str:
    return re.sub(r"[^0-9]", "", phone)


def phone_link(phone: str | None) -> str | None:
    if not phone or not _digits(phone):
        return None
    return f"tel:{phone.strip()}"


def email_link(email: str | None) -> str | None:
    if not email:
        return None
    return f"mailto:{email.strip()}"


def whatsapp_link(phone: str | None, message: str = "") -> str | None:
    """wa.me deep link; the number keeps digits only, the message is URL-encoded."""
    if not phone:
        return None
    digits = _digits(phone)
    if not digits:
        return None
    if not message:
        return f"{WHATSAPP_BASE_URL}/{digits}"
    text = quote(message, safe="!*'()")
    return f"{WHATSAPP_BASE_URL}/{digits}?text={text}"
