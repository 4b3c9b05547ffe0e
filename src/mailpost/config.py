"""Pipeline configuration for mailpost.

:class:`MailpostConfig` is a plain dataclass that captures every knob the
pipeline reads.  Instances are passed to :class:`~mailpost.pipeline.Mailpost`
and from there to each stage.

:func:`load_config` builds one from a TOML file.  Both the historical
CamelCase keys (``ImageDir``, ``PostDir``, ``MaxImgWidth`` ...) and the
snake_case field names are accepted; keys that belong to the mail
transport (``Server``, ``User``, ``Password``) are ignored.
"""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mailpost.errors import MailpostConfigError

# Mapping of TOML keys used by existing ``mailpost.toml`` files to fields.
_LEGACY_KEYS: dict[str, str] = {
    "ImageDir": "image_dir",
    "PostDir": "post_dir",
    "DatePathFmt": "date_path_fmt",
    "BaseURL": "base_url",
    "ImagePath": "image_path",
    "MaxImgWidth": "max_img_width",
    "PostFrom": "post_from",
}

# Reference-date layout elements found in legacy ``DatePathFmt`` values,
# in replacement order.
_LAYOUT_ELEMENTS: list[tuple[str, str]] = [
    ("2006", "%Y"),
    ("January", "%B"),
    ("Jan", "%b"),
    ("01", "%m"),
    ("02", "%d"),
    ("06", "%y"),
]


def layout_to_strftime(layout: str) -> str:
    """Translate a reference-date layout such as ``"2006/01"`` into the
    equivalent ``strftime`` format (``"%Y/%m"``).

    Values that already contain a ``%`` directive are returned unchanged.
    """
    if "%" in layout:
        return layout
    for element, directive in _LAYOUT_ELEMENTS:
        layout = layout.replace(element, directive)
    return layout


@dataclass
class MailpostConfig:
    """Complete configuration for a mailpost run.

    Parameters
    ----------
    image_dir:
        Directory template for normalized images.  Recognizes ``<date>``
        (and ``<type>``, which is left as-is for images).
    post_dir:
        Directory template for markdown posts.  Recognizes ``<type>`` and
        ``<date>``.
    date_path_fmt:
        :meth:`~datetime.date.strftime` layout used to render a post's
        ``date`` into the ``<date>`` token, e.g. ``"%Y/%m"``.
    base_url:
        Site root used to build public image URLs.
    image_path:
        URL path under *base_url* where images are served.
    max_img_width:
        Images wider than this (in pixels) are downsampled.
    jpeg_quality:
        JPEG quality used when re-encoding images.
    post_from:
        If non-empty, only messages whose sender address equals this value
        (case-insensitive) are processed.
    fetch_timeout_seconds:
        Timeout for each remote image request.
    fetch_max_attempts:
        Total attempts per remote image URL, including the first.
    fetch_retry_base_delay:
        Base delay (seconds) for exponential backoff between attempts.
    fetch_retry_max_delay:
        Upper cap (seconds) on the computed backoff delay.
    fetch_retry_jitter:
        Scale each backoff delay randomly to 50-100 % of its value.
    user_agent:
        ``User-Agent`` header sent with remote image requests.
    metrics:
        Optional :class:`~mailpost.observability.MetricsHook` backend.
    """

    # ── Paths ───────────────────────────────────────────────────────────
    image_dir: str = "static/images/<date>"

    post_dir: str = "content/<type>/<date>"

    date_path_fmt: str = "%Y/%m"

    # ── URLs ────────────────────────────────────────────────────────────
    base_url: str = ""

    image_path: str = "images"

    # ── Images ──────────────────────────────────────────────────────────
    max_img_width: int = 1024

    jpeg_quality: int = 75

    # ── Messages ────────────────────────────────────────────────────────
    post_from: str = ""

    # ── Remote fetch ────────────────────────────────────────────────────
    fetch_timeout_seconds: float = 30.0

    fetch_max_attempts: int = 3

    fetch_retry_base_delay: float = 0.5

    fetch_retry_max_delay: float = 8.0

    fetch_retry_jitter: bool = True

    user_agent: str = "mailpost/0.1"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_img_width <= 0:
            raise ValueError(f"max_img_width must be > 0, got {self.max_img_width}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be between 1 and 95, got {self.jpeg_quality}")
        if self.fetch_timeout_seconds <= 0:
            raise ValueError(
                f"fetch_timeout_seconds must be > 0, got {self.fetch_timeout_seconds}"
            )
        if self.fetch_max_attempts < 1:
            raise ValueError(f"fetch_max_attempts must be >= 1, got {self.fetch_max_attempts}")
        if self.fetch_retry_base_delay < 0:
            raise ValueError(
                f"fetch_retry_base_delay must be >= 0, got {self.fetch_retry_base_delay}"
            )
        if self.fetch_retry_max_delay < 0:
            raise ValueError(
                f"fetch_retry_max_delay must be >= 0, got {self.fetch_retry_max_delay}"
            )
        if not self.image_dir:
            raise ValueError("image_dir must not be empty")
        if not self.post_dir:
            raise ValueError("post_dir must not be empty")


def load_config(path: str | Path) -> MailpostConfig:
    """Read a :class:`MailpostConfig` from a TOML file.

    Parameters
    ----------
    path:
        Location of the TOML file.

    Returns
    -------
    MailpostConfig
        The parsed and validated configuration.

    Raises
    ------
    MailpostConfigError
        If the file does not exist, is not valid TOML, or a value has the
        wrong type.
    ValueError
        If a value fails :class:`MailpostConfig` validation.
    """
    path = Path(path)
    try:
        with path.open("rb") as fh:
            raw = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise MailpostConfigError(
            message=f"Config file does not exist: {path}",
            context={"path": str(path)},
            cause=exc,
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise MailpostConfigError(
            message=f"Config file is not valid TOML: {exc}",
            context={"path": str(path)},
            cause=exc,
        ) from exc

    # Expected TOML value type per field, taken from the defaults.
    expected = {
        f.name: type(f.default)
        for f in dataclasses.fields(MailpostConfig)
        if f.name != "metrics"
    }
    values: dict[str, Any] = {}
    for key, value in raw.items():
        name = _LEGACY_KEYS.get(key, key)
        if name not in expected:
            continue
        value = _coerce(key, value, expected[name], path)
        if key == "DatePathFmt":
            value = layout_to_strftime(value)
        values[name] = value
    return MailpostConfig(**values)


def _coerce(key: str, value: Any, expected: type, path: Path) -> Any:
    """Check a TOML value against its field type.

    Integers are accepted for float fields.  ``bool`` is never accepted
    for a numeric field even though it subclasses ``int``.
    """
    if isinstance(value, bool) == (expected is bool):
        if isinstance(value, expected):
            return value
        if expected is float and isinstance(value, int):
            return float(value)
    raise MailpostConfigError(
        message=(
            f"Config key {key!r} must be {expected.__name__}, "
            f"got {type(value).__name__} {value!r}"
        ),
        context={"path": str(path), "key": key},
    )
