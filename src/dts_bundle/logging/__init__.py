"""Tracing and run report utilities."""

from .report import (
    BundleStatistics,
    JsonReportWriter,
    collect_statistics,
    statistics_to_dict,
    trace_statistics,
    utc_timestamp,
)
from .trace import Tracer, configure_logging

__all__ = [
    "BundleStatistics",
    "JsonReportWriter",
    "Tracer",
    "collect_statistics",
    "configure_logging",
    "statistics_to_dict",
    "trace_statistics",
    "utc_timestamp",
]
