"""Image reference matching and body rewriting."""

from .patterns import MARKDOWN, PATTERNS, SHORTCODE_FIGURE, SHORTCODE_IMG, ReferencePattern
from .resolve import ReferenceResolver

__all__ = [
    "MARKDOWN",
    "PATTERNS",
    "SHORTCODE_FIGURE",
    "SHORTCODE_IMG",
    "ReferencePattern",
    "ReferenceResolver",
]
