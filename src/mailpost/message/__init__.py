"""MIME message decoding into posts and images."""

from .classify import classify_part
from .decode import decode_message, parse_message

__all__ = [
    "classify_part",
    "decode_message",
    "parse_message",
]
