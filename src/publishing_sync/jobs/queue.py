"""Job queue boundary.

The dispatcher only ever appends to a queue.  Delivery is at-least-once
and unordered: ``JobRunner`` may run drained jobs concurrently.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from .models import JobKind, SyncJob

logger = logging.getLogger(__name__)


class JobQueue(Protocol):
    """Anything that can accept a job for later execution."""

    def enqueue(self, queue_name: str, job: SyncJob) -> None:
        """Append *job* to *queue_name*. Raises on substrate failure."""
        ...


class InMemoryJobQueue:
    """Append-only in-process queue.

    Jobs stay inspectable until drained, which makes it usable both as
    the embedded substrate and as a fake in tests.
    """

    def __init__(self) -> None:
        self._jobs: list[SyncJob] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def enqueue(self, queue_name: str, job: SyncJob) -> None:
        if job.queue_name != queue_name:
            job = job.model_copy(update={"queue_name": queue_name})
        with self._lock:
            self._jobs.append(job)
        logger.debug("Enqueued %s on %s", job.describe(), queue_name)

    def jobs(
        self,
        kind: JobKind | None = None,
        queue_name: str | None = None,
    ) -> list[SyncJob]:
        """Pending jobs in enqueue order, optionally filtered."""
        with self._lock:
            pending = list(self._jobs)
        return [
            j
            for j in pending
            if (kind is None or j.kind == kind)
            and (queue_name is None or j.queue_name == queue_name)
        ]

    def drain(self) -> list[SyncJob]:
        """Remove and return all pending jobs."""
        with self._lock:
            pending, self._jobs = self._jobs, []
        return pending

    def clear(self) -> None:
        with self._lock:
            self._jobs.clear()
