"""File-name sanitization for posts and images.

Both helpers are idempotent and only ever produce names made of
``[a-z0-9_.]``.
"""

from __future__ import annotations

import re

_UNSAFE_RE = re.compile(r"[^a-z0-9_.]")

# Stem used when an image name has nothing left before its extension.
_DEFAULT_IMAGE_STEM = "image"


def sanitize_filename(name: str) -> str:
    """Lower-case *name* and replace every character outside
    ``[a-z0-9_.]`` with ``_``.

    Examples
    --------
    >>> sanitize_filename("Hello, World!")
    'hello__world_'
    """
    return _UNSAFE_RE.sub("_", name.lower())


def sanitize_image_name(name: str) -> str:
    """Sanitize *name* and force its extension to ``.jpg``.

    The extension is everything after the last ``.``; images are always
    re-encoded as JPEG so the original extension is discarded.

    Examples
    --------
    >>> sanitize_image_name("My Photo.PNG")
    'my_photo.jpg'
    >>> sanitize_image_name("diagram")
    'diagram.jpg'
    """
    cleaned = sanitize_filename(name)
    stem, dot, _ = cleaned.rpartition(".")
    if not dot:
        stem = cleaned
    return f"{stem or _DEFAULT_IMAGE_STEM}.jpg"
