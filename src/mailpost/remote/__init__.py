"""Remote image retrieval over HTTP."""

from .retries import compute_backoff, should_retry
from .transport import ImageTransport

__all__ = [
    "ImageTransport",
    "compute_backoff",
    "should_retry",
]
