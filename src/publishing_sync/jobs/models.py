"""Pydantic models for deferred publishing jobs.

- ``JobKind``: what a job does when it runs.
- ``SyncJob``: immutable job descriptor carrying identifiers only.
- ``JobResult``: outcome of running one job (after retries).
- ``RunReport``: aggregate outcome of one runner pass.

All models are frozen.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class JobKind(str, Enum):
    """Kinds of deferred publishing work."""

    PUBLISH = "publish"
    DRAFT = "draft"
    SCHEDULE = "schedule"
    UNSCHEDULE = "unschedule"
    COMING_SOON = "coming_soon"
    GONE = "gone"


class SyncJob(BaseModel):
    """A unit of deferred work.

    Carries identifiers, never content: the executor re-reads the
    entity when it runs, so the payload reflects state at execution
    time.

    Attributes:
        kind: What the job does.
        queue_name: Queue the job was enqueued on.
        entity_class: Class name of the entity (publish, draft, coming_soon).
        entity_id: Id of the entity (publish, draft, coming_soon).
        update_type: Update type passed through to the payload.
        locale: Locale to present.
        base_path: Target path (schedule, unschedule, gone).
        publish_time: Scheduled publication time (schedule).
    """

    kind: JobKind
    queue_name: str
    entity_class: str | None = None
    entity_id: int | None = None
    update_type: str | None = None
    locale: str | None = None
    base_path: str | None = None
    publish_time: datetime | None = None

    model_config = {"frozen": True}

    @property
    def args(self) -> tuple:
        """Positional arguments the job was enqueued with."""
        match self.kind:
            case JobKind.PUBLISH | JobKind.DRAFT:
                return (
                    self.entity_class,
                    self.entity_id,
                    self.update_type,
                    self.locale,
                )
            case JobKind.SCHEDULE:
                return (self.base_path, self.publish_time)
            case JobKind.COMING_SOON:
                return (self.entity_id, self.locale)
            case _:
                return (self.base_path,)

    def describe(self) -> str:
        """Short human-readable label for logs and reports."""
        args = ", ".join(str(a) for a in self.args)
        return f"{self.kind.value}({args})"


class JobResult(BaseModel):
    """Outcome of running one job.

    Attributes:
        job: The job that ran.
        success: Whether the job completed.
        attempts: Number of attempts made.
        error: Error message of the last failed attempt.
    """

    job: SyncJob
    success: bool
    attempts: int
    error: str | None = None

    model_config = {"frozen": True}


class RunReport(BaseModel):
    """Aggregate results of one runner pass."""

    results: list[JobResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def succeeded(self) -> list[JobResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[JobResult]:
        return [r for r in self.results if not r.success]

    @property
    def retried(self) -> list[JobResult]:
        """Results that needed more than one attempt."""
        return [r for r in self.results if r.attempts > 1]
