"""
Run a search off the interactive thread and hand the result back.

The search itself has no cancellation or timeout; once started it runs to
completion, so the runner only guards against starting a second one.
"""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from magic_search import SearchResult, search

logger = logging.getLogger(__name__)


class SearchInProgressError(RuntimeError):
    """A search was requested while the previous one is still running."""


class BackgroundSearch:
    def __init__(self,
                 rng: random.Random | None = None,
                 max_attempts: int | None = None) -> None:
        self.rng = rng
        self.max_attempts = max_attempts
        self._pool = ThreadPoolExecutor(max_workers=1,
                                        thread_name_prefix="magic-search")
        self._lock = threading.Lock()
        # Cleared at submit, set once the result has been handed over
        self._idle = threading.Event()
        self._idle.set()
        self._future: Optional[Future] = None

    @property
    def busy(self) -> bool:
        return not self._idle.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the last search has been delivered."""
        return self._idle.wait(timeout)

    def start(self, n: int,
              on_done: Callable[[SearchResult], None] | None = None,
              on_error: Callable[[BaseException], None] | None = None) -> Future:
        """Submit a search for order ``n``; callbacks run on the worker thread."""
        with self._lock:
            if not self._idle.is_set():
                raise SearchInProgressError("A search is already running")
            self._idle.clear()
            try:
                self._future = self._pool.submit(search, n, self.rng,
                                                 self.max_attempts)
            except RuntimeError:
                self._idle.set()
                raise
            future = self._future

        def _deliver(f: Future) -> None:
            try:
                exc = f.exception()
                if exc is not None:
                    logger.error("Search for order %d failed: %s", n, exc)
                    if on_error is not None:
                        on_error(exc)
                    return
                if on_done is not None:
                    on_done(f.result())
            finally:
                self._idle.set()

        future.add_done_callback(_deliver)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundSearch":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
