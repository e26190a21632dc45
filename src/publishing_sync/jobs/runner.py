"""Job runner: the retrying, concurrent side of the job substrate.

``JobRunner.run`` executes one job with bounded exponential backoff on
transient delivery errors.  ``JobRunner.run_pending`` drains a queue
and runs every job on worker threads, at most ``max_parallel_jobs`` at
a time.  Execution order is not guaranteed and no job's failure stops
the others.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable

from ..core.async_utils import gather_limited, make_semaphore, run_sync_limited
from ..errors import DeliveryRejectedError, TransientDeliveryError
from .models import JobResult, RunReport, SyncJob
from .queue import InMemoryJobQueue
from .workers import JobExecutor

logger = logging.getLogger(__name__)


class JobRunner:
    """Run jobs with retries.

    Args:
        executor: Executes a single attempt of a job.
        max_attempts: Attempts per job before giving up.
        backoff_base: Delay in seconds before the first retry; doubles
            on every further retry.
        max_parallel_jobs: Jobs running at once in ``run_pending``.
        sleep: Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        executor: JobExecutor,
        max_attempts: int = 5,
        backoff_base: float = 1.0,
        max_parallel_jobs: int = 4,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.executor = executor
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.max_parallel_jobs = max_parallel_jobs
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number *attempt* (1-based)."""
        return self.backoff_base * 2 ** (attempt - 1)

    # ------------------------------------------------------------------
    # Single job
    # ------------------------------------------------------------------

    def run(self, job: SyncJob) -> JobResult:
        """Run *job* until it succeeds, fails for good, or runs out of attempts.

        Only ``TransientDeliveryError`` is retried.  Any other error ends
        the job with a failed result counting the attempts made so far.
        """
        last_error: str | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                self.executor.execute(job)
                return JobResult(job=job, success=True, attempts=attempt)
            except TransientDeliveryError as exc:
                last_error = str(exc)
                if attempt < self.max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                        job.describe(),
                        attempt,
                        self.max_attempts,
                        exc,
                        delay,
                    )
                    self._sleep(delay)
            except (DeliveryRejectedError, ValueError) as exc:
                logger.error("%s rejected: %s", job.describe(), exc)
                return JobResult(
                    job=job, success=False, attempts=attempt, error=str(exc)
                )
            except Exception as exc:
                logger.exception(
                    "Unexpected error running %s (attempt %d)",
                    job.describe(),
                    attempt,
                )
                return JobResult(
                    job=job, success=False, attempts=attempt, error=str(exc)
                )

        logger.error(
            "%s gave up after %d attempts: %s",
            job.describe(),
            self.max_attempts,
            last_error,
        )
        return JobResult(
            job=job,
            success=False,
            attempts=self.max_attempts,
            error=last_error,
        )

    # ------------------------------------------------------------------
    # Queue passes
    # ------------------------------------------------------------------

    async def run_all_async(self, jobs: list[SyncJob]) -> RunReport:
        """Run *jobs* concurrently on worker threads."""
        started_at = datetime.now(timezone.utc).isoformat()
        semaphore = make_semaphore(self.max_parallel_jobs)
        results = await gather_limited(
            [
                run_sync_limited(semaphore, self.run, job) for job in jobs
            ]
        )
        report = RunReport(
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(
            "Ran %d jobs: %d succeeded, %d failed",
            len(report.results),
            len(report.succeeded),
            len(report.failed),
        )
        return report

    def run_pending(self, queue: InMemoryJobQueue) -> RunReport:
        """Drain *queue* and run everything that was pending."""
        return asyncio.run(self.run_all_async(queue.drain()))
