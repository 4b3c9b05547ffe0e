"""Error hierarchy for mailpost.

Every error raised by the pipeline inherits from :class:`MailpostError`.
Each carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and
an optional ``cause`` (chained exception).

Most errors are *recoverable*: the stage that raises them is wrapped at
the per-item boundary (MIME part, remote URL, image) and the error is
turned into a :class:`~mailpost.models.PipelineWarning`.  Only
:class:`MailpostOutputError` is allowed to escape a batch run.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error mailpost can raise."""

    CONFIG_ERROR = "CONFIG_ERROR"
    FRONT_MATTER_ERROR = "FRONT_MATTER_ERROR"
    MIME_DECODE_ERROR = "MIME_DECODE_ERROR"
    IMAGE_DECODE_ERROR = "IMAGE_DECODE_ERROR"
    FETCH_ERROR = "FETCH_ERROR"
    OUTPUT_ERROR = "OUTPUT_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class MailpostError(Exception):
    """Base exception for all mailpost errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class MailpostConfigError(MailpostError):
    """The configuration file is missing, cannot be parsed, or holds a
    value of the wrong type.

    Context keys: ``path``, ``key`` (for a mistyped value).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Recoverable per-item errors
# ---------------------------------------------------------------------------

class MailpostFrontMatterError(MailpostError):
    """A text part has no usable front matter (missing block, YAML error,
    or empty ``title``).  The post is dropped.

    Context keys: ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.FRONT_MATTER_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class MailpostMimeError(MailpostError):
    """A MIME part could not be decoded.  The part is skipped.

    Context keys: ``content_type``, ``filename``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MIME_DECODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class MailpostImageDecodeError(MailpostError):
    """Image bytes could not be decoded.  The image is skipped and its
    references are left unresolved.

    Context keys: ``image``, ``size_bytes``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_DECODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class MailpostFetchError(MailpostError):
    """A remote image could not be retrieved (network failure or non-200
    response after all attempts).

    Context keys: ``url``, ``status_code``, ``attempts``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.FETCH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Fatal errors
# ---------------------------------------------------------------------------

class MailpostOutputError(MailpostError):
    """A destination directory or file could not be created or written.

    This is fatal to the current batch and is surfaced to the caller.

    Context keys: ``path``, ``key`` (for a mistyped value).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.OUTPUT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
