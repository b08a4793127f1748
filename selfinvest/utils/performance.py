"""
System performance snapshot utilities.
"""

from __future__ import annotations

import threading
import time

import psutil

from selfinvest.models.schemas import PerformanceReport
from selfinvest.utils.time_utils import format_elapsed


def get_process_memory_mb() -> float:
    """
    Return the RSS (Resident Set Size) of the current process in megabytes.
    Uses :mod:`psutil` for cross-platform accuracy.
    """
    process = psutil.Process()
    rss_bytes: int = process.memory_info().rss
    return rss_bytes / (1024 * 1024)


def get_active_thread_count() -> int:
    """Return the number of currently active Python threads."""
    return threading.active_count()


def generate_report(start_time: float) -> PerformanceReport:
    """
    Build a performance report for work that began at *start_time*.

    Parameters
    ----------
    start_time:
        A :func:`time.perf_counter` reading taken when the work started.

    Returns
    -------
    PerformanceReport
        ``time`` as ``HH:mm:ss.SSS``, ``memory`` as ``"X.XX MB"`` and the
        live thread count.
    """
    elapsed_ms = (time.perf_counter() - start_time) * 1_000

    return PerformanceReport(
        time=format_elapsed(elapsed_ms),
        memory=f"{get_process_memory_mb():.2f} MB",
        threads=get_active_thread_count(),
    )
