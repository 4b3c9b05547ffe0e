"""Data models for mailpost.

Plain dataclasses and enums shared by every pipeline stage.  Behaviour
lives in the stage modules; the only logic here is what is needed to
answer simple state questions (``Image.is_materialized``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PartKind(str, Enum):
    """Classification of a MIME part by its media type."""

    MULTIPART = "multipart"
    """A container whose sub-parts are walked in turn."""

    IMAGE = "image"
    """A JPEG or PNG attachment."""

    TEXT = "text"
    """A plain-text body that may carry a post."""

    UNKNOWN = "unknown"
    """Anything else; ignored."""


class ImageSource(str, Enum):
    """Where the bytes of an :class:`Image` came from."""

    ATTACHMENT = "attachment"
    """An ``image/*`` MIME part of the message."""

    REMOTE = "remote"
    """An ``http(s)://`` URL fetched from a post's markdown."""


class ReferenceStyle(str, Enum):
    """The three markup dialects an image can be referenced with."""

    MARKDOWN = "markdown"
    """``![alt](locator "title")``"""

    SHORTCODE_FIGURE = "shortcode_figure"
    """``{{< figure src="locator" >}}``"""

    SHORTCODE_IMG = "shortcode_img"
    """``{{< img src="locator" >}}``"""


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass
class Image:
    """One picture destined for a published post.

    Attributes
    ----------
    origin_identifier:
        The attachment filename or the source URL.  Locators found in post
        bodies are compared against this value.
    sanitized_name:
        Output file name: lower-cased, restricted to ``[a-z0-9_.]`` and
        always ending in ``.jpg``.
    raw_bytes:
        Encoded image data as received, before normalization.
    source:
        Whether the image was attached or fetched.
    resolved_path:
        Where the normalized JPEG was written.  ``None`` until a post
        references the image.
    public_url:
        The URL written into post bodies.  ``None`` until materialized.
    failed:
        ``True`` once normalization has failed; the image is not retried.
    """

    origin_identifier: str
    sanitized_name: str
    raw_bytes: bytes = field(repr=False)
    source: ImageSource = ImageSource.ATTACHMENT
    resolved_path: Path | None = None
    public_url: str | None = None
    failed: bool = False

    @property
    def is_materialized(self) -> bool:
        return self.resolved_path is not None and self.public_url is not None


@dataclass
class Post:
    """One blog entry extracted from an email.

    Attributes
    ----------
    title:
        Front-matter ``title``; never empty.
    date:
        Front-matter ``date`` as a ``YYYY-MM-DD`` string (may be empty).
    type:
        Front-matter ``type``, lower-cased.
    body:
        The full text including front matter.  Rewritten in place as image
        references are resolved.
    destination_dir:
        Directory the post is written to.  Computed once at extraction.
    filename:
        Sanitized title plus ``.md``.
    """

    title: str
    date: str
    type: str
    body: str
    destination_dir: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.destination_dir / self.filename


# ---------------------------------------------------------------------------
# Diagnostics and results
# ---------------------------------------------------------------------------

@dataclass
class PipelineWarning:
    """A non-fatal issue encountered while processing a batch.

    Attributes
    ----------
    code:
        A machine-readable code, one of :class:`~mailpost.errors.ErrorCode`.
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class BatchResult:
    """Outcome of :meth:`mailpost.pipeline.Mailpost.run`.

    Attributes
    ----------
    posts_written:
        Paths of the markdown files written, in processing order.
    images_written:
        Paths of the JPEG files written, in processing order.
    warnings:
        Every recoverable problem met during the batch.
    """

    posts_written: list[Path] = field(default_factory=list)
    images_written: list[Path] = field(default_factory=list)
    warnings: list[PipelineWarning] = field(default_factory=list)
