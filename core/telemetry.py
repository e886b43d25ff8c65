from __future__ import annotations

import logging
import time
import tracemalloc

import psutil

from core.models import CheckResult

log = logging.getLogger(__name__)


def format_memory(num_bytes: float) -> str:
    return f"{round(num_bytes / 1024 / 1024, 2)} MB"


def memory_usage() -> dict[str, str]:
    """Current process memory, plus the traced Python heap when tracing."""
    info = psutil.Process().memory_info()
    usage = {
        "rss": format_memory(info.rss),
        "vms": format_memory(info.vms),
    }
    if tracemalloc.is_tracing():
        current, peak = tracemalloc.get_traced_memory()
        usage["heap_current"] = format_memory(current)
        usage["heap_peak"] = format_memory(peak)
    return usage


def elapsed_since(start: float) -> float:
    return time.perf_counter() - start


def report(result: CheckResult) -> None:
    log.info("Time taken: %.2fs", result.duration_seconds)
    log.info(
        "Total items processed: %d / %d", result.processed_items, result.items_to_check
    )
    log.info("Final memory usage: %s", memory_usage())
