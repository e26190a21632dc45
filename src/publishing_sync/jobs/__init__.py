"""Deferred publishing jobs.

Modules:

- ``models``   -- ``JobKind``, ``SyncJob``, ``JobResult``, ``RunReport``.
- ``queue``    -- ``JobQueue`` protocol and ``InMemoryJobQueue``.
- ``workers``  -- ``JobExecutor``: one job, one publishing API call.
- ``runner``   -- ``JobRunner``: retries with backoff, concurrent passes.
- ``reporter`` -- text and JSON formatting of run reports.
"""

from .models import JobKind, JobResult, RunReport, SyncJob
from .queue import InMemoryJobQueue, JobQueue
from .reporter import format_run_report, report_to_json
from .runner import JobRunner
from .workers import JobExecutor

__all__ = [
    "InMemoryJobQueue",
    "JobExecutor",
    "JobKind",
    "JobQueue",
    "JobResult",
    "JobRunner",
    "RunReport",
    "SyncJob",
    "format_run_report",
    "report_to_json",
]
