"""Message decoding: MIME tree walk into posts and images.

:func:`decode_message` walks a parsed message with an explicit worklist.
Each part is classified with :func:`~mailpost.message.classify.classify_part`:

* ``MULTIPART`` parts push their children (document order is kept);
* ``IMAGE`` parts become :class:`~mailpost.models.Image` entities;
* ``TEXT`` parts are handed to :func:`~mailpost.post.extract_post`;
* ``UNKNOWN`` parts are ignored.

A part that cannot be decoded is skipped with a warning; the walk always
continues with the next part.
"""

from __future__ import annotations

import email
from email import errors as email_errors
from email import policy
from email.message import EmailMessage, Message

from mailpost.config import MailpostConfig
from mailpost.errors import MailpostFrontMatterError, MailpostMimeError
from mailpost.image import image_from_attachment
from mailpost.models import Image, PartKind
from mailpost.observability import MetricsHook, get_logger, resolve_metrics
from mailpost.post import extract_post
from mailpost.store import BatchStore

from .classify import classify_part

log = get_logger("mailpost.message")

_BASE64_DEFECTS = (
    email_errors.InvalidBase64PaddingDefect,
    email_errors.InvalidBase64CharactersDefect,
    email_errors.InvalidBase64LengthDefect,
)


def parse_message(raw: bytes | Message) -> Message:
    """Parse raw RFC 822 bytes; already parsed messages pass through."""
    if isinstance(raw, Message):
        return raw
    return email.message_from_bytes(raw, policy=policy.default)


def _part_context(part: Message, reason: str) -> dict[str, str | None]:
    return {
        "content_type": part.get_content_type(),
        "filename": part.get_filename(),
        "reason": reason,
    }


def _decode_image_part(part: Message) -> Image:
    filename = part.get_filename()
    if not filename:
        raise MailpostMimeError(
            message="Image part has no filename",
            context=_part_context(part, "missing_filename"),
        )

    defects_before = len(part.defects)
    data = part.get_payload(decode=True)
    new_defects = part.defects[defects_before:]
    if any(isinstance(d, _BASE64_DEFECTS) for d in new_defects):
        raise MailpostMimeError(
            message=f"Image part {filename!r} is not valid base64",
            context=_part_context(part, "base64_error"),
        )
    if not data:
        raise MailpostMimeError(
            message=f"Image part {filename!r} is empty",
            context=_part_context(part, "empty_payload"),
        )
    return image_from_attachment(data, filename)


def _decode_text_part(part: Message) -> str:
    try:
        if isinstance(part, EmailMessage):
            return part.get_content()
        payload = part.get_payload(decode=True) or b""
        return payload.decode(part.get_content_charset() or "utf-8", errors="replace")
    except (LookupError, UnicodeError) as exc:
        raise MailpostMimeError(
            message=f"Text part cannot be decoded: {exc}",
            context=_part_context(part, "charset_error"),
            cause=exc,
        ) from exc


def decode_message(
    message: Message,
    store: BatchStore,
    config: MailpostConfig,
    metrics: MetricsHook | None = None,
) -> None:
    """Walk *message* and add every post and image it carries to *store*.

    Parameters
    ----------
    message:
        A parsed message, see :func:`parse_message`.
    store:
        The batch store receiving posts, images and warnings.
    config:
        Passed to post extraction.
    metrics:
        Optional metrics hook.

    Raises
    ------
    MailpostOutputError
        If a post's destination directory cannot be created.
    """
    metrics = resolve_metrics(metrics)
    worklist: list[Message] = [message]

    while worklist:
        part = worklist.pop()
        kind = classify_part(part.get_content_type())

        try:
            if kind is PartKind.MULTIPART:
                if not part.is_multipart():
                    raise MailpostMimeError(
                        message="Multipart part has no readable boundary",
                        context=_part_context(part, "boundary_error"),
                    )
                worklist.extend(reversed(part.get_payload()))
            elif kind is PartKind.IMAGE:
                image = _decode_image_part(part)
                store.add_image(image)
                log.debug(
                    "Found image attachment",
                    extra={"extra_fields": {"op": "decode_message", "image": image.origin_identifier}},
                )
            elif kind is PartKind.TEXT:
                _add_post(_decode_text_part(part), store, config)
            else:
                log.debug(
                    "Ignoring part",
                    extra={"extra_fields": {"op": "decode_message", "content_type": part.get_content_type()}},
                )
        except MailpostMimeError as exc:
            metrics.increment("mailpost.parts_skipped_total", tags={"kind": kind.value})
            store.warn(exc)
            log.warning(
                "Skipping undecodable part",
                extra={"extra_fields": {"op": "decode_message", **exc.context, "error": exc.message}},
            )


def _add_post(text: str, store: BatchStore, config: MailpostConfig) -> None:
    try:
        post = extract_post(text, config)
    except MailpostFrontMatterError as exc:
        store.warn(exc)
        log.warning(
            "Couldn't find post title in front matter, skipping",
            extra={"extra_fields": {"op": "extract_post", **exc.context}},
        )
        return
    store.add_post(post)
    log.debug(
        "Found post",
        extra={"extra_fields": {"op": "extract_post", "post": post.title, "path": str(post.path)}},
    )
