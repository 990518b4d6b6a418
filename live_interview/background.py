"""Fire-and-forget execution of live answer scoring."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Set

from config.settings import settings

logger = logging.getLogger(__name__)


class ScoringTasks:  # Thread pool whose task failures are logged, never raised to the caller
    def __init__(self, max_workers: Optional[int] = None) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.SCORING_WORKERS,
            thread_name_prefix="live-scoring",
        )
        self._pending: Set[Future] = set()
        self._guard = threading.Lock()

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        def _run() -> None:
            try:
                fn(*args, **kwargs)
            except Exception:
                logger.exception("Background scoring task %s failed", getattr(fn, "__name__", fn))

        future = self._executor.submit(_run)
        with self._guard:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._guard:
            self._pending.discard(future)

    def drain(self, timeout: Optional[float] = None) -> None:
        """Block until every submitted task has finished."""

        with self._guard:
            pending = set(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


__all__ = ["ScoringTasks"]
