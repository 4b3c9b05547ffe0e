"""Image collection from attachments and remote URLs.

Attachments become :class:`~mailpost.models.Image` entities while the
message is decoded.  Remote images are gathered in a second pass, once
every post of the batch is known: each ``http(s)://`` target of a
markdown image reference is fetched once and added to the store under its
exact URL.
"""

from __future__ import annotations

import posixpath
import re
from urllib.parse import urlsplit

from mailpost.errors import MailpostFetchError
from mailpost.models import Image, ImageSource
from mailpost.observability import MetricsHook, get_logger, resolve_metrics
from mailpost.remote import ImageTransport
from mailpost.store import BatchStore
from mailpost.utils import sanitize_image_name

log = get_logger("mailpost.image")

# Markdown image whose target is an absolute http(s) URL.  The alt text
# may hold one level of balanced brackets, e.g. ``![see [1]](url)``.
REMOTE_IMAGE_RE = re.compile(r"!\[(?:[^\[\]\n]|\[[^\[\]\n]*\])*\]\(\s*(https?://[^\s)]+)")


def image_from_attachment(data: bytes, filename: str) -> Image:
    """Build an :class:`Image` for an attached file named *filename*."""
    return Image(
        origin_identifier=filename,
        sanitized_name=sanitize_image_name(filename),
        raw_bytes=data,
        source=ImageSource.ATTACHMENT,
    )


def image_from_url(data: bytes, url: str) -> Image:
    """Build an :class:`Image` for bytes downloaded from *url*.

    The name comes from the basename of the URL path; the query string and
    fragment are ignored.
    """
    name = posixpath.basename(urlsplit(url).path)
    return Image(
        origin_identifier=url,
        sanitized_name=sanitize_image_name(name),
        raw_bytes=data,
        source=ImageSource.REMOTE,
    )


def find_remote_urls(body: str) -> list[str]:
    """Return the http(s) targets of markdown image references in *body*,
    in document order and without duplicates.
    """
    seen: dict[str, None] = {}
    for match in REMOTE_IMAGE_RE.finditer(body):
        seen.setdefault(match.group(1), None)
    return list(seen)


def collect_remote_images(
    store: BatchStore,
    transport: ImageTransport,
    metrics: MetricsHook | None = None,
) -> int:
    """Fetch every remotely linked image referenced by the store's posts.

    URLs already present in the store are not fetched again, and a URL
    that failed is not retried for later posts.  A failed fetch is logged
    and recorded as a warning; the remaining URLs are still processed.

    Returns
    -------
    int
        The number of images added to the store.
    """
    metrics = resolve_metrics(metrics)
    failed: set[str] = set()
    added = 0
    for post in store.posts:
        for url in find_remote_urls(post.body):
            if url in failed or store.has_image(url):
                continue
            try:
                data = transport.fetch(url)
            except MailpostFetchError as exc:
                failed.add(url)
                metrics.increment("mailpost.fetch_failures_total")
                store.warn(exc)
                log.warning(
                    "Failed to fetch remote image",
                    extra={
                        "extra_fields": {
                            "op": "collect_remote_images",
                            "post": post.title,
                            **exc.context,
                            "error": exc.message,
                        }
                    },
                )
                continue
            store.add_image(image_from_url(data, url))
            added += 1
            log.debug(
                "Fetched remote image",
                extra={"extra_fields": {"op": "collect_remote_images", "url": url}},
            )
    return added
