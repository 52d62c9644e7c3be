"""
Opaque cursor codec and safe slicing over a sorted index view.
"""

import base64
import binascii
import re
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

# Offsets never come near 18 digits; longer text is rejected before int().
_OFFSET_PATTERN = re.compile(r"[0-9]{1,18}")


def encode_cursor(offset: int) -> str:
    """Encode an absolute offset as base64 of its decimal form."""
    if offset < 0:
        raise ValueError("cursor offset must be non-negative")
    return base64.b64encode(str(offset).encode("ascii")).decode("ascii")


def decode_cursor(cursor: Optional[str]) -> Optional[int]:
    """Decode a cursor back to its offset, or None when it is absent or invalid."""
    if not isinstance(cursor, str) or not cursor:
        return None
    try:
        text = base64.b64decode(cursor.encode("ascii"), validate=True).decode("ascii")
    except (binascii.Error, UnicodeError, ValueError):
        return None
    if not _OFFSET_PATTERN.fullmatch(text):
        return None
    return int(text)


def slice_page(sorted_items: Sequence[T], limit: int, offset: int) -> Tuple[List[T], int]:
    """Return ``sorted_items[offset:offset + limit]`` with both bounds clamped.

    The second element is always the full length of ``sorted_items``.
    """
    total_count = len(sorted_items)
    safe_offset = min(max(offset, 0), total_count)
    safe_limit = min(limit, total_count - safe_offset)

    if safe_limit <= 0 or safe_offset >= total_count:
        return [], total_count
    return list(sorted_items[safe_offset:safe_offset + safe_limit]), total_count
