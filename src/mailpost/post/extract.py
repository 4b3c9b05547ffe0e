"""Post extraction from front matter.

A post is a text whose first lines are a YAML front-matter block::

    ---
    title: An apple a day
    date: 2015-06-01
    type: Blog
    ---
    ![An apple](apple.jpg "This is the apple.")

Only ``title``, ``date`` and ``type`` are read; the body is kept verbatim,
front matter included.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

import yaml

from mailpost.config import MailpostConfig
from mailpost.errors import MailpostFrontMatterError
from mailpost.models import Post
from mailpost.paths import apply_path_template, ensure_dir, format_date_path
from mailpost.utils import sanitize_filename

_FRONT_MATTER_RE = re.compile(
    r"\A\s*---[ \t]*\r?\n(?P<yaml>.*?)\r?\n(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def parse_front_matter(text: str) -> dict[str, Any]:
    """Return the front-matter mapping at the top of *text*.

    Raises
    ------
    MailpostFrontMatterError
        If there is no delimited block, the YAML is invalid, or it is not
        a mapping.
    """
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        raise MailpostFrontMatterError(
            message="No front matter block found",
            context={"reason": "missing_block"},
        )
    try:
        data = yaml.safe_load(match.group("yaml"))
    except yaml.YAMLError as exc:
        raise MailpostFrontMatterError(
            message=f"Front matter is not valid YAML: {exc}",
            context={"reason": "yaml_error"},
            cause=exc,
        ) from exc
    if not isinstance(data, dict):
        raise MailpostFrontMatterError(
            message="Front matter is not a mapping",
            context={"reason": "not_a_mapping"},
        )
    return data


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_date_text(value: Any) -> str:
    # YAML turns unquoted 2015-06-01 into a date object.
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return _as_text(value)


def extract_post(text: str, config: MailpostConfig) -> Post:
    """Build a :class:`Post` from *text* and create its destination directory.

    Parameters
    ----------
    text:
        The decoded text of a message part.
    config:
        Supplies ``post_dir`` and ``date_path_fmt``.

    Returns
    -------
    Post
        The extracted post.  ``destination_dir`` exists on disk.

    Raises
    ------
    MailpostFrontMatterError
        If the front matter is missing, invalid, or has no ``title``.
    MailpostOutputError
        If the destination directory cannot be created.
    """
    meta = parse_front_matter(text)

    title = _as_text(meta.get("title"))
    if not title:
        raise MailpostFrontMatterError(
            message="Front matter has no title",
            context={"reason": "missing_title"},
        )

    post_date = _as_date_text(meta.get("date"))
    post_type = _as_text(meta.get("type")).lower()

    destination = apply_path_template(
        config.post_dir,
        post_type,
        format_date_path(post_date, config.date_path_fmt),
    )

    return Post(
        title=title,
        date=post_date,
        type=post_type,
        body=text,
        destination_dir=ensure_dir(destination),
        filename=sanitize_filename(title) + ".md",
    )
