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
    return html.escape(value.strip(), quote=True)


def sanitize_name(value: str, max_length: int = 255) -> str:
    """Sanitize a display name (client, staff, product) and enforce a length limit"""
    cleaned = sanitize_string(" ".join((value or "").split())) or ""
    if not cleaned:
        raise ValueError("Name is required")
    if len(cleaned) > max_length:
        raise ValueError(f"Name must be at most {max_length} characters")
    return cleaned
