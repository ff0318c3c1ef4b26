"""Plane-parallel execution helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

logger = logging.getLogger(__name__)


def for_each_plane(task: Callable[[int], None], planes: Iterable[int], n_jobs: int = 1) -> None:
    """Run ``task`` once per plane index and wait for all of them.

    Each task must only write to storage owned by its own plane, so no
    locking is needed. The first exception raised by a task is re-raised
    after the pool has shut down.

    Parameters
    ----------
    task : Callable[[int], None]
        Work for a single 1-based plane index.
    planes : Iterable[int]
        Plane indices to process.
    n_jobs : int, optional
        Number of worker threads. ``1`` runs the tasks inline, by default 1.
    """
    if n_jobs is None or n_jobs <= 1:
        for plane in planes:
            task(plane)
        return

    with ThreadPoolExecutor(max_workers=n_jobs) as executor:
        futures = [executor.submit(task, plane) for plane in planes]
        logger.debug("Submitted %d plane tasks to %d workers", len(futures), n_jobs)
        for future in as_completed(futures):
            future.result()
