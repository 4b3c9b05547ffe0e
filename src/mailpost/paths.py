"""Directory templating, date formatting and URL joining.

Output locations are configured as templates containing the literal
tokens ``<type>`` and ``<date>``::

    content/<type>/<date>   ->   content/blog/2015/06

:func:`apply_path_template` is a pure substitution; :func:`ensure_dir`
creates the result on disk.  Failing to create an output directory is the
one error that aborts a batch.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

from mailpost.errors import MailpostOutputError

TYPE_TOKEN = "<type>"
DATE_TOKEN = "<date>"

# Layout of the ``date`` front-matter field.
FRONT_MATTER_DATE_FMT = "%Y-%m-%d"

# Rendered in place of dates that cannot be parsed.
ZERO_DATE = date(1, 1, 1)


def apply_path_template(template: str, type_: str = "", date_part: str = "") -> str:
    """Substitute ``<type>`` and then ``<date>`` into *template*.

    Each token is replaced at most once (first occurrence), and only when
    the corresponding value is non-empty.  *type_* is stripped of
    surrounding spaces.

    Parameters
    ----------
    template:
        A path template such as ``"content/<type>/<date>"``.
    type_:
        The post type (front-matter ``type``).
    date_part:
        The already formatted date, see :func:`format_date_path`.

    Returns
    -------
    str
        The template with tokens replaced.

    Examples
    --------
    >>> apply_path_template("content/<type>/<date>", " blog ", "2015/06")
    'content/blog/2015/06'
    """
    if type_:
        template = template.replace(TYPE_TOKEN, type_.strip(" "), 1)
    if date_part:
        template = template.replace(DATE_TOKEN, date_part, 1)
    return template


def parse_post_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string, returning :data:`ZERO_DATE` when the
    value is empty or malformed.
    """
    try:
        return datetime.strptime(value, FRONT_MATTER_DATE_FMT).date()
    except (TypeError, ValueError):
        return ZERO_DATE


def format_date_path(value: str, fmt: str) -> str:
    """Render a front-matter date with the configured layout.

    Unparsable input is rendered as the zero date instead of raising.

    Examples
    --------
    >>> format_date_path("2015-06-01", "%Y/%m")
    '2015/06'
    """
    parsed = parse_post_date(value)
    if parsed == ZERO_DATE:
        # strftime does not zero-pad years below 1000 on every platform.
        fmt = fmt.replace("%Y", "0001")
    return parsed.strftime(fmt)


def ensure_dir(path: str | Path) -> Path:
    """Create *path* (and its parents) if it does not exist.

    Raises
    ------
    MailpostOutputError
        If the directory cannot be created.
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MailpostOutputError(
            message=f"Couldn't create directory {path}: {exc}",
            context={"path": str(path)},
            cause=exc,
        ) from exc
    return path


def join_url(base: str, *segments: str) -> str:
    """Join a base URL and path segments with single ``/`` separators.

    Empty segments are dropped and the scheme's ``//`` is preserved.

    Examples
    --------
    >>> join_url("https://example.com/", "/images", "2015/06", "a.jpg")
    'https://example.com/images/2015/06/a.jpg'
    """
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    root = base.rstrip("/")
    if not parts:
        return root or "/"
    return "/".join([root, *parts]) if root else "/" + "/".join(parts)
