"""MIME part classification."""

from __future__ import annotations

from mailpost.models import PartKind

_MULTIPART_PREFIX = "multipart/"
_IMAGE_PREFIXES = ("image/jpeg", "image/png")
_TEXT_PREFIXES = ("text/plain",)


def classify_part(content_type: str) -> PartKind:
    """Classify a part by its media type.

    Rules are checked in order: any ``multipart/*`` (including
    ``multipart/alternative``, whose ``text/plain`` child is then used),
    JPEG/PNG images, plain text, and finally everything else.

    Examples
    --------
    >>> classify_part("multipart/mixed")
    <PartKind.MULTIPART: 'multipart'>
    >>> classify_part("IMAGE/PNG")
    <PartKind.IMAGE: 'image'>
    >>> classify_part("text/html")
    <PartKind.UNKNOWN: 'unknown'>
    """
    ctype = content_type.strip().lower()
    if ctype.startswith(_MULTIPART_PREFIX):
        return PartKind.MULTIPART
    if ctype.startswith(_IMAGE_PREFIXES):
        return PartKind.IMAGE
    if ctype.startswith(_TEXT_PREFIXES):
        return PartKind.TEXT
    return PartKind.UNKNOWN
