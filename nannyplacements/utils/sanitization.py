import html
import re
from typing import Any, Optional


def sanitize_string(value: Optional[Any]) -> str:
    """
    Escape HTML special characters so user-supplied values can be placed inside
    email markup. Returns an empty string for None.
    """
    if value is None:
        return ""
    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", str(value))
    return html.escape(value, quote=True)


def sanitize_multiline(value: Optional[str]) -> str:
    """Escape a block of text and keep its line breaks as <br/> for email bodies"""
    return sanitize_string(value).replace("\n", "<br/>")
