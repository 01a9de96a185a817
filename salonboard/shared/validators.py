"""Shared validation utilities"""

import re
from typing import Optional

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_clock_time(value: str) -> str:
    """
    Validate a wall-clock time label.

    Args:
        value: Time string such as "09:30" or "9:30"

    Returns:
        Zero-padded HH:MM label

    Raises:
        ValueError: If the value is not a valid 24h time
    """
    value = (value or "").strip()
    if re.match(r"^\d:[0-5]\d$", value):
        value = f"0{value}"
    if not CLOCK_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


def validate_hex_color(value: str) -> str:
    """Validate a #RRGGBB color and return it lowercased"""
    if not value or not HEX_COLOR_PATTERN.match(value):
        raise ValueError("Must be valid hex color")
    return value.lower()


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an international phone number.

    Args:
        phone: Phone number string in various formats

    Returns:
        Digits with a leading + when one was given (+212600000000)

    Raises:
        ValueError: If the number has fewer than 8 or more than 15 digits
    """
    if not phone:
        return phone

    has_plus = phone.strip().startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not 8 <= len(digits) <= 15:
        raise ValueError("Phone number must have between 8 and 15 digits")

    return f"+{digits}" if has_plus else digits
