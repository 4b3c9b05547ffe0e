"""Writing finished posts to disk."""

from __future__ import annotations

from pathlib import Path

from mailpost.errors import MailpostOutputError
from mailpost.models import Post
from mailpost.observability import get_logger

log = get_logger("mailpost.post")


def write_post(post: Post) -> Path:
    """Write ``post.body`` to ``post.destination_dir / post.filename``.

    An existing file is truncated.

    Raises
    ------
    MailpostOutputError
        If the file cannot be written.
    """
    path = post.path
    try:
        path.write_text(post.body, encoding="utf-8", newline="")
    except OSError as exc:
        raise MailpostOutputError(
            message=f"Failed to write post to {path}: {exc}",
            context={"path": str(path), "post": post.title},
            cause=exc,
        ) from exc

    log.info(
        "Saved post",
        extra={"extra_fields": {"op": "write_post", "post": post.title, "path": str(path)}},
    )
    return path
