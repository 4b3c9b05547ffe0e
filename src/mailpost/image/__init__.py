"""Image pipeline: collection from attachments and URLs, normalization,
and materialization to disk.

Exports
-------
image_from_attachment / image_from_url
    Build :class:`~mailpost.models.Image` entities.
find_remote_urls / collect_remote_images
    Discover and fetch remotely linked images.
normalize_image
    Resize, flatten and re-encode image bytes as JPEG.
materialize_image
    Normalize an image and write it to its final location.
"""

from .collect import (
    collect_remote_images,
    find_remote_urls,
    image_from_attachment,
    image_from_url,
)
from .normalize import materialize_image, normalize_image

__all__ = [
    "collect_remote_images",
    "find_remote_urls",
    "image_from_attachment",
    "image_from_url",
    "materialize_image",
    "normalize_image",
]
