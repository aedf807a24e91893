"""Threading utilities for sizing the status worker pool."""

import os
import sys
from typing import Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with GIL disabled (free-threading mode)
        False if running with GIL enabled or Python < 3.13
    """
    is_gil_enabled = getattr(sys, "_is_gil_enabled", None)
    if is_gil_enabled is None:
        return False
    return not is_gil_enabled()


def get_optimal_worker_count(user_specified: Optional[int] = None, tasks: Optional[int] = None) -> int:
    """Calculate worker count for I/O-bound git status queries.

    Args:
        user_specified: User-specified worker count, if provided
        tasks: Number of jobs that will be submitted; the pool never exceeds it

    Returns:
        Number of workers to use (at least 1)
    """
    if user_specified is not None and user_specified > 0:
        workers = user_specified
    else:
        cpu_count = os.cpu_count() or 1
        if is_free_threading_enabled():
            workers = min(64, cpu_count * 2)
        else:
            # CPU_count + 4 is a good heuristic for I/O-bound work
            workers = min(32, cpu_count + 4)

    if tasks is not None:
        workers = min(workers, tasks)
    return max(1, workers)
