"""Observability: structured logging and metrics hooks for mailpost."""

from __future__ import annotations

from .logger import ROOT_LOGGER_NAME, StructuredFormatter, configure_logging, get_logger
from .metrics import MetricsHook, NoopMetricsHook, resolve_metrics

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "ROOT_LOGGER_NAME",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "resolve_metrics",
]
