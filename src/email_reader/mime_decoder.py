"""
Helpers for turning Gmail API message parts into text.
"""
import base64
import binascii
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional

from ..utils.models import MessagePart, RawMessage


def get_header(message: RawMessage, name: str) -> str:
    """Return a header value by exact name, or an empty string."""
    return message.headers.get(name, "")


def parse_header_date(value: str) -> Optional[datetime]:
    """Parse an RFC 2822 ``Date`` header."""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None


def decode_data(data: str) -> str:
    """Decode base64 (standard or URL-safe alphabet) body data as UTF-8."""
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return ""
    return raw.decode("utf-8", errors="replace")


def decode_body(part: MessagePart) -> str:
    """
    Return the best available text for a part tree.

    Inline data on the part wins. Otherwise the first text/plain child is
    used, multipart children are searched recursively, and text/html
    children are the last resort. A tree with no body yields "".
    """
    if part.data:
        return decode_data(part.data)

    if part.parts:
        for child in part.parts:
            if child.mime_type == "text/plain" and child.data:
                return decode_data(child.data)
            if child.mime_type.startswith("multipart/"):
                nested = decode_body(child)
                if nested:
                    return nested

        for child in part.parts:
            if child.mime_type == "text/html" and child.data:
                return decode_data(child.data)

    return ""
