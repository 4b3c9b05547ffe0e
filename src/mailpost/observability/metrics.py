"""Metrics hook protocol and no-op default implementation.

mailpost emits counters and timings at key points of a batch run.  By
default a :class:`NoopMetricsHook` is used.  Supply any object satisfying
:class:`MetricsHook` via ``MailpostConfig(metrics=...)`` to route them to
StatsD, Prometheus or similar.

Emitted metric names:

* ``mailpost.posts_written_total``        -- counter
* ``mailpost.images_written_total``       -- counter
* ``mailpost.image_failures_total``       -- counter
* ``mailpost.references_rewritten_total`` -- counter
* ``mailpost.parts_skipped_total``        -- counter
* ``mailpost.fetch_failures_total``       -- counter
* ``mailpost.fetch_retries_total``        -- counter
* ``mailpost.fetch_duration_ms``          -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(hook: MetricsHook | None) -> MetricsHook:
    """Return *hook*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return hook if hook is not None else NoopMetricsHook()
