"""
Cursor pagination helpers.
"""

from .cursor import decode_cursor, encode_cursor, slice_page

__all__ = ["decode_cursor", "encode_cursor", "slice_page"]
