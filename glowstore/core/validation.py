"""
Input validation for glow records.
Patterns are compiled once at import and shared by every request.
"""

import re
from typing import Optional

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# "metadata;values", both pipe-delimited numbers, e.g. "4|6|8;0.5|0.3|0.0|1.0"
DATA_FORMAT_PATTERN = re.compile(r"^[0-9.|]+;[0-9.|]+$")


def is_valid_object_id(value: Optional[str]) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    # fullmatch: "$" alone would accept a trailing newline
    return UUID_PATTERN.fullmatch(value) is not None


def is_valid_glow_data(value: Optional[str]) -> bool:
    """Lexical check only. Counts and numeric ranges are the caller's business."""
    if not isinstance(value, str) or not value.strip():
        return False
    return DATA_FORMAT_PATTERN.fullmatch(value) is not None


def normalize_object_id(value: str) -> str:
    """Canonical form of an already validated object id."""
    return value.lower()
