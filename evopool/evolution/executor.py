"""
Joined worker-pool fan-out used by the evaluation phase.

Every call to :meth:`ParallelExecutor.map` returns only after all submitted
work finished, so selection never observes a partially evaluated generation.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ParallelExecutor:
    """Thread pool abstraction; ``max_workers=1`` runs everything inline."""

    def __init__(self, max_workers: Optional[int] = 1) -> None:
        self._logger = logging.getLogger(__name__)
        self.max_workers = max_workers
        self._last_stats: Dict[str, object] = {}

    @property
    def backend(self) -> str:
        return "inline" if self.max_workers == 1 else "threads"

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
        payloads = list(items)
        start_time = time.perf_counter()
        if self.backend == "inline" or len(payloads) < 2:
            results = [fn(item) for item in payloads]
        else:
            workers = self.max_workers or min(8, len(payloads))
            # Leaving the with-block joins every worker; exceptions re-raise here.
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(fn, payloads))
        self.snapshot(payloads=len(payloads), duration=time.perf_counter() - start_time)
        return results

    def snapshot(self, payloads: int, duration: float) -> Dict[str, object]:
        stats: Dict[str, object] = {
            "backend": self.backend,
            "payloads": payloads,
            "duration": round(duration, 3),
            "max_workers": self.max_workers,
        }
        self._logger.debug("Evaluated %d payloads on %s in %.3fs", payloads, self.backend, duration)
        self._last_stats = stats
        return stats

    def last_stats(self) -> Dict[str, object]:
        return dict(self._last_stats)
