# fest-backend/events/sanitizers.py
"""
Input cleanup for admin-entered event text.
"""
import re
from typing import Optional

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> str:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes control characters (newlines and tabs are kept)
    - Enforces maximum length
    - Returns empty string for None input
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    text = CONTROL_CHARS.sub('', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text
