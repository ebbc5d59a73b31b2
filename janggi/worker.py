"""Runs engine searches off the interactive path.

A ``SearchWorker`` accepts value-typed requests, runs them on a thread pool
and hands back a single result per request. Only the most recent request
counts: starting a new one cancels the pending one and results that finish
after being superseded are dropped.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .engine import Engine, SearchResult
from .game import GameSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchRequest:
    """Search payload: a snapshot copied out of the live game and a depth."""

    snapshot: GameSnapshot
    depth: int


def run_search(request: SearchRequest) -> SearchResult:
    snapshot = request.snapshot
    engine = Engine(depth=request.depth)
    return engine.search(snapshot.board, snapshot.turn, snapshot.move_history)


class SearchWorker:
    """At most one live search at a time; newer requests supersede older ones."""

    def __init__(self, max_workers: int = 1, executor: Optional[ThreadPoolExecutor] = None):
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="janggi-search"
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[Future] = None

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            if self._pending is not None and self._pending.cancel():
                logger.info("Cancelled pending search")
            self._pending = None
            return self._generation

    def _submit(self, request: SearchRequest) -> Tuple[int, Future]:
        # Bump, cancel and submit together so two starts cannot both stay pending
        with self._lock:
            self._generation += 1
            if self._pending is not None and self._pending.cancel():
                logger.info("Cancelled pending search")
            self._pending = self._executor.submit(run_search, request)
            return self._generation, self._pending

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def start(
        self, request: SearchRequest, callback: Callable[[SearchResult], None]
    ) -> Future:
        """Submit a search; ``callback`` runs with the result unless superseded."""
        generation, future = self._submit(request)

        def _deliver(done: Future) -> None:
            if done.cancelled():
                return
            if not self.is_current(generation):
                logger.info("Discarded stale search result (request %d)", generation)
                return
            error = done.exception()
            if error is not None:
                logger.error("Search failed: %s", error)
                return
            callback(done.result())

        future.add_done_callback(_deliver)
        return future

    async def search(self, request: SearchRequest) -> Optional[SearchResult]:
        """Run a search from async code. Returns None if a newer request superseded it."""
        loop = asyncio.get_running_loop()
        generation, future = self._submit(request)
        try:
            result = await asyncio.wrap_future(future, loop=loop)
        except asyncio.CancelledError:
            if future.cancelled() and not self.is_current(generation):
                return None
            raise
        if not self.is_current(generation):
            logger.info("Discarded stale search result (request %d)", generation)
            return None
        return result

    def cancel(self) -> None:
        """Drop whatever is in flight."""
        self._next_generation()

    def shutdown(self, wait: bool = True) -> None:
        self.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
