"""Structured JSON logging for mailpost.

Every pipeline module logs through a child of the ``"mailpost"`` logger
(``mailpost.message``, ``mailpost.resolver`` ...).  Only that root logger
carries a handler; records from the children propagate up to it and are
written as single-line JSON objects, so the output of a scheduled run can
be shipped to a log pipeline or grepped as-is.

Typical structured output::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "INFO",
     "logger": "mailpost.post", "message": "Saved post",
     "op": "write_post", "path": "content/blog/2015/06/hello.md"}

Usage::

    from mailpost.observability import configure_logging, get_logger

    configure_logging(level="info")          # optional; once per process
    log = get_logger("resolver")             # -> "mailpost.resolver"
    log.warning("image skipped", extra={"extra_fields": {"image": "a.jpg"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

ROOT_LOGGER_NAME = "mailpost"

DEFAULT_LEVEL = logging.INFO


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Fields passed via ``extra={"extra_fields": {...}}`` are
    merged into the top-level object; fields whose value is ``None`` (an
    absent status code, no error) are left out.  ``exc_info`` is
    serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields: dict[str, Any] = getattr(record, "extra_fields", None) or {}
        entry.update((key, value) for key, value in fields.items() if value is not None)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class _StructuredHandler(logging.StreamHandler):
    """The handler :func:`configure_logging` installs on the root logger."""


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def configure_logging(
    level: int | str = DEFAULT_LEVEL,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install the structured handler on the ``"mailpost"`` root logger.

    Calling it again replaces the previous handler, so the level and
    stream can be changed at any time.  Handlers added by the host
    application are left alone.

    Parameters
    ----------
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.
    stream:
        Output stream.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The ``"mailpost"`` root logger.
    """
    resolved = _resolve_level(level)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in [h for h in root.handlers if isinstance(h, _StructuredHandler)]:
        root.removeHandler(handler)
        handler.close()

    handler = _StructuredHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(resolved)
    root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return the mailpost logger for *name*.

    Names outside the ``mailpost`` namespace are placed under it
    (``"resolver"`` becomes ``"mailpost.resolver"``).  The root logger is
    configured with defaults on first use if :func:`configure_logging` has
    not been called.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(isinstance(h, _StructuredHandler) for h in root.handlers):
        configure_logging()

    return logging.getLogger(name)
