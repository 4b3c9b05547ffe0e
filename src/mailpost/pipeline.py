"""Batch pipeline: messages in, markdown posts and JPEG images out.

:class:`Mailpost` runs one batch of already fetched messages through every
stage::

    raw bytes -> decode_message -> BatchStore{posts, images}
              -> collect_remote_images -> ReferenceResolver -> write_post

Usage::

    from mailpost import Mailpost, MailpostConfig

    mp = Mailpost(MailpostConfig(base_url="https://example.com"))
    result = mp.run([raw_bytes_1, raw_bytes_2])
    for path in result.posts_written:
        print(path)

Only output errors (a directory or file that cannot be written) abort the
batch; everything else is recorded in :attr:`BatchResult.warnings`.  Files
written before an abort are left in place.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from email.message import Message

from mailpost.config import MailpostConfig
from mailpost.image import collect_remote_images
from mailpost.message import decode_message, parse_message
from mailpost.models import BatchResult
from mailpost.observability import get_logger, resolve_metrics
from mailpost.post import write_post
from mailpost.remote import ImageTransport
from mailpost.resolver import ReferenceResolver
from mailpost.store import BatchStore

log = get_logger("mailpost.pipeline")

_ANGLE_ADDR_RE = re.compile(r"<(.*)>")


def sender_address(message: Message) -> str:
    """Return the lower-cased sender address from the ``From`` header.

    ``"Del <Del@Example.com>"`` becomes ``"del@example.com"``; a bare
    address is returned lower-cased as-is.
    """
    from_header = str(message.get("From", "")).lower()
    match = _ANGLE_ADDR_RE.search(from_header)
    if match:
        return match.group(1)
    return from_header.strip()


def decode_subject(message: Message) -> str:
    """Return the decoded ``Subject`` header, or ``""`` when absent."""
    subject = message.get("Subject")
    return str(subject) if subject is not None else ""


class Mailpost:
    """Turn batches of email messages into posts and images.

    Parameters
    ----------
    config:
        Pipeline configuration.
    transport:
        Optional :class:`ImageTransport` for remote images.  When omitted a
        transport is created for each :meth:`run` and closed afterwards.
    """

    def __init__(
        self,
        config: MailpostConfig,
        transport: ImageTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._metrics = resolve_metrics(config.metrics)

    def accepts(self, message: Message) -> bool:
        """Return ``True`` if *message* passes the ``post_from`` filter."""
        wanted = self._config.post_from.strip().lower()
        return not wanted or sender_address(message) == wanted

    def process_message(self, raw: bytes | Message, store: BatchStore) -> bool:
        """Decode one message into *store*.

        Returns
        -------
        bool
            ``False`` if the message was rejected by the sender filter.
        """
        message = parse_message(raw)
        fields = {
            "op": "process_message",
            "subject": decode_subject(message),
            "from": sender_address(message),
        }
        if not self.accepts(message):
            log.info("Ignoring message from unexpected sender", extra={"extra_fields": fields})
            return False

        log.info("Processing message", extra={"extra_fields": fields})
        decode_message(message, store, self._config, self._metrics)
        return True

    def run(self, messages: Iterable[bytes | Message]) -> BatchResult:
        """Process a batch of messages end to end.

        Raises
        ------
        MailpostOutputError
            If an output directory or file cannot be written.
        """
        store = BatchStore()
        for raw in messages:
            self.process_message(raw, store)

        if self._transport is not None:
            collect_remote_images(store, self._transport, self._metrics)
        else:
            with ImageTransport(self._config) as transport:
                collect_remote_images(store, transport, self._metrics)

        resolver = ReferenceResolver(store, self._config, self._metrics)
        result = BatchResult(warnings=store.warnings)
        for post in store.posts:
            resolver.resolve(post)
            result.posts_written.append(write_post(post))
            self._metrics.increment("mailpost.posts_written_total")
        result.images_written = resolver.images_written

        log.info(
            "Batch complete",
            extra={
                "extra_fields": {
                    "op": "run",
                    "posts": len(result.posts_written),
                    "images": len(result.images_written),
                    "warnings": len(result.warnings),
                }
            },
        )
        return result
