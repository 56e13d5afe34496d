"""Background regeneration with atomic, last-request-wins publication."""
from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from .config.schema import GenerationRequest
from .data.random import SeedLike
from .pipeline import regenerate
from .types import SampleBatch

logger = logging.getLogger(__name__)

Generate = Callable[[GenerationRequest, SeedLike], SampleBatch]
Subscriber = Callable[[SampleBatch], None]


class BatchPublisher:
    """Run generation off the caller's thread and publish finished batches.

    ``current`` is a single reference swapped under a lock, so readers either
    see the previous batch or the complete new one.  A result is published
    only when its request is still the newest one submitted; results of
    superseded requests are dropped.
    """

    def __init__(self, generate: Generate = regenerate, max_workers: int = 1):
        self._generate = generate
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="tremas-gen")
        self._tickets = itertools.count(1)
        self._lock = threading.Lock()
        self._latest = 0
        self._current: Optional[SampleBatch] = None
        self._published = 0
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    @property
    def current(self) -> Optional[SampleBatch]:
        return self._current

    @property
    def published_ticket(self) -> int:
        return self._published

    def subscribe(self, fn: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(fn)

    # ------------------------------------------------------------------
    def submit(self, request: GenerationRequest, seed: SeedLike = None) -> Future:
        """Queue a regeneration; the returned future resolves to its batch."""
        with self._lock:
            ticket = next(self._tickets)
            self._latest = ticket
        logger.debug("submitted ticket %d: %s", ticket, request)
        return self._pool.submit(self._run, ticket, request, seed)

    def _run(self, ticket: int, request: GenerationRequest, seed: SeedLike) -> SampleBatch:
        try:
            batch = self._generate(request, seed)
        except Exception:
            logger.exception("generation for ticket %d failed", ticket)
            raise
        self._publish(ticket, batch)
        return batch

    def _publish(self, ticket: int, batch: SampleBatch) -> None:
        with self._lock:
            if ticket != self._latest:
                logger.debug("dropping stale ticket %d (latest %d)", ticket, self._latest)
                return
            self._current = batch
            self._published = ticket
            subscribers = list(self._subscribers)
        logger.info("published ticket %d: %d points", ticket, batch.count)
        for fn in subscribers:
            try:
                fn(batch)
            except Exception:
                logger.exception("subscriber %r failed for ticket %d", fn, ticket)

    def regenerate_now(self, request: GenerationRequest, seed: SeedLike = None) -> SampleBatch:
        """Submit and block until the batch exists (published unless superseded)."""
        return self.submit(request, seed).result()

    # ------------------------------------------------------------------
    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=not wait)

    def __enter__(self) -> "BatchPublisher":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


__all__ = ["BatchPublisher"]
