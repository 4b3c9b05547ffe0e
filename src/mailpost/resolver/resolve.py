"""Image reference resolution.

:class:`ReferenceResolver` rewrites a post body so that every image
reference whose locator names a known :class:`~mailpost.models.Image`
points at the image's public URL.

For each pattern in :data:`~mailpost.resolver.patterns.PATTERNS` (markdown,
then figure shortcodes, then img shortcodes) matches are processed in
document order.  A matched image is materialized the first time any post
references it; afterwards its URL is reused.

Every matching reference is rewritten, including repeated references to
the same image.  Only the locator inside a reference is replaced: the same
file name appearing in prose is left alone.
"""

from __future__ import annotations

import re
from pathlib import Path

from mailpost.config import MailpostConfig
from mailpost.errors import MailpostImageDecodeError
from mailpost.image import materialize_image
from mailpost.models import Post
from mailpost.observability import MetricsHook, get_logger, resolve_metrics
from mailpost.store import BatchStore

from .patterns import PATTERNS, ReferencePattern

log = get_logger("mailpost.resolver")


class ReferenceResolver:
    """Resolve image references for the posts of one batch.

    Parameters
    ----------
    store:
        The batch store holding known images.
    config:
        Supplies image directory, URL and normalization settings.
    metrics:
        Optional metrics hook.

    Attributes
    ----------
    images_written:
        Paths of the images materialized so far, in order.
    """

    def __init__(
        self,
        store: BatchStore,
        config: MailpostConfig,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._metrics = resolve_metrics(metrics)
        self.images_written: list[Path] = []

    def resolve(self, post: Post) -> int:
        """Rewrite every resolvable image reference in ``post.body``.

        Returns
        -------
        int
            The number of references rewritten.

        Raises
        ------
        MailpostOutputError
            If an image file or directory cannot be written.
        """
        total = 0
        for pattern in PATTERNS:
            post.body, count = self._rewrite(pattern, post)
            total += count
        if total:
            self._metrics.increment("mailpost.references_rewritten_total", total)
        return total

    def _rewrite(self, pattern: ReferencePattern, post: Post) -> tuple[str, int]:
        count = 0

        def replace(match: re.Match[str]) -> str:
            nonlocal count
            url = self._url_for(match.group("locator"), post)
            if url is None:
                return match.group(0)
            count += 1
            offset = match.start()
            start, end = match.span("locator")
            text = match.group(0)
            return text[: start - offset] + url + text[end - offset:]

        body = pattern.regex.sub(replace, post.body)
        return body, count

    def _url_for(self, locator: str, post: Post) -> str | None:
        """Return the public URL for *locator*, materializing on first use."""
        image = self._store.find_image(locator)
        if image is None or image.failed:
            return None

        if not image.is_materialized:
            try:
                path = materialize_image(image, post, self._config)
            except MailpostImageDecodeError as exc:
                image.failed = True
                exc.context["image"] = image.origin_identifier
                self._store.warn(exc)
                self._metrics.increment("mailpost.image_failures_total")
                log.warning(
                    "Failed to decode image, leaving references unresolved",
                    extra={
                        "extra_fields": {
                            "op": "resolve",
                            "post": post.title,
                            "image": image.origin_identifier,
                            "error": exc.message,
                        }
                    },
                )
                return None
            self.images_written.append(path)
            self._metrics.increment("mailpost.images_written_total")

        return image.public_url
