"""mailpost: turn emails into static-site blog posts.

Public re-exports
-----------------

* **Pipeline:** :class:`Mailpost`
* **Configuration:** :class:`MailpostConfig`, :func:`load_config`
* **Errors:** Every :class:`MailpostError` subclass and :class:`ErrorCode`
* **Models:** :class:`Post`, :class:`Image`, :class:`BatchResult` and friends

Usage::

    from mailpost import Mailpost, load_config

    mp = Mailpost(load_config("mailpost.toml"))
    result = mp.run(raw_messages)
"""

from __future__ import annotations

__version__ = "0.1.0"

# ── Configuration ───────────────────────────────────────────────────────
from mailpost.config import MailpostConfig, load_config

# ── Errors ──────────────────────────────────────────────────────────────
from mailpost.errors import (
    ErrorCode,
    MailpostConfigError,
    MailpostError,
    MailpostFetchError,
    MailpostFrontMatterError,
    MailpostImageDecodeError,
    MailpostMimeError,
    MailpostOutputError,
)

# ── Models ──────────────────────────────────────────────────────────────
from mailpost.models import (
    BatchResult,
    Image,
    ImageSource,
    PartKind,
    PipelineWarning,
    Post,
    ReferenceStyle,
)

# ── Pipeline ────────────────────────────────────────────────────────────
from mailpost.pipeline import Mailpost
from mailpost.store import BatchStore

__all__ = [
    "__version__",
    # Pipeline
    "Mailpost",
    "BatchStore",
    # Configuration
    "MailpostConfig",
    "load_config",
    # Errors
    "MailpostError",
    "ErrorCode",
    "MailpostConfigError",
    "MailpostFrontMatterError",
    "MailpostMimeError",
    "MailpostImageDecodeError",
    "MailpostFetchError",
    "MailpostOutputError",
    # Models
    "Post",
    "Image",
    "ImageSource",
    "PartKind",
    "ReferenceStyle",
    "PipelineWarning",
    "BatchResult",
]
