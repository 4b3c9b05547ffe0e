"""Image normalization and materialization.

Every published image goes through the same steps:

1. Decode the received bytes with Pillow.
2. Composite onto an opaque white RGB background to remove transparency
   (palette and bilevel images become RGB here).
3. Downsample to ``max_img_width`` (Lanczos) when wider, keeping the
   aspect ratio.
4. Re-encode as JPEG.

:func:`materialize_image` then writes the result under the templated
image directory and records the file path and public URL on the
:class:`~mailpost.models.Image`.
"""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from mailpost.config import MailpostConfig
from mailpost.errors import MailpostImageDecodeError, MailpostOutputError
from mailpost.models import Image, Post
from mailpost.observability import get_logger
from mailpost.paths import apply_path_template, ensure_dir, format_date_path, join_url

log = get_logger("mailpost.image")

_WHITE = (255, 255, 255)


def _scaled_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Return the target size for an image, preserving aspect ratio."""
    if width <= max_width:
        return width, height
    new_height = max(1, round(height * max_width / width))
    return max_width, new_height


def _flatten(img: PILImage.Image) -> PILImage.Image:
    """Composite *img* onto an opaque white RGB canvas."""
    if img.mode == "P":
        # Palette images may carry transparency in their info dict.
        img = img.convert("RGBA")
    if img.mode in ("RGBA", "LA", "PA"):
        background = PILImage.new("RGB", img.size, _WHITE)
        background.paste(img, mask=img.getchannel("A"))
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def normalize_image(data: bytes, max_width: int, quality: int = 75) -> bytes:
    """Decode, downsample, flatten and re-encode image bytes as JPEG.

    Parameters
    ----------
    data:
        Encoded image bytes (JPEG or PNG in practice; anything Pillow
        can read is accepted).
    max_width:
        Maximum width in pixels.  Narrower images are not resized.
    quality:
        JPEG quality.

    Returns
    -------
    bytes
        The JPEG-encoded result.

    Raises
    ------
    MailpostImageDecodeError
        If *data* is not a decodable image.
    """
    try:
        with PILImage.open(io.BytesIO(data)) as src:
            src.load()
            img = src.copy()
    except (
        UnidentifiedImageError,
        PILImage.DecompressionBombError,
        OSError,
        ValueError,
        SyntaxError,
    ) as exc:
        raise MailpostImageDecodeError(
            message=f"Failed to decode image: {exc}",
            context={"size_bytes": len(data)},
            cause=exc,
        ) from exc

    # Flatten first: Pillow resizes "P" and "1" images with NEAREST.
    img = _flatten(img)

    target = _scaled_size(img.width, img.height, max_width)
    if target != img.size:
        img = img.resize(target, PILImage.Resampling.LANCZOS)

    out = io.BytesIO()
    img.save(out, format="JPEG", quality=quality)
    return out.getvalue()


def materialize_image(image: Image, post: Post, config: MailpostConfig) -> Path:
    """Normalize *image* and write it next to the other images for *post*.

    The image directory is ``config.image_dir`` with ``<date>`` rendered
    from the referencing post's date.  On success ``image.resolved_path``
    and ``image.public_url`` are set.

    Returns
    -------
    Path
        The file written.

    Raises
    ------
    MailpostImageDecodeError
        If the image bytes cannot be decoded.  Nothing is written.
    MailpostOutputError
        If the directory or file cannot be written.
    """
    date_part = format_date_path(post.date, config.date_path_fmt)
    jpeg = normalize_image(image.raw_bytes, config.max_img_width, config.jpeg_quality)

    image_dir = ensure_dir(apply_path_template(config.image_dir, date_part=date_part))
    path = image_dir / image.sanitized_name
    try:
        path.write_bytes(jpeg)
    except OSError as exc:
        raise MailpostOutputError(
            message=f"Failed to write image file {path}: {exc}",
            context={"path": str(path)},
            cause=exc,
        ) from exc

    image.resolved_path = path
    image.public_url = join_url(
        config.base_url, config.image_path, date_part, image.sanitized_name,
    )

    log.info(
        "Saved image",
        extra={
            "extra_fields": {
                "op": "materialize_image",
                "image": image.origin_identifier,
                "path": str(path),
                "url": image.public_url,
            }
        },
    )
    return path
