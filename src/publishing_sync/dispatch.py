"""Dispatch orchestrator: decides what to send to the publishing API.

``PublishingApi`` is called by the application whenever content changes.
Apart from ``publish_redirect`` it never touches the network: it checks
preconditions, then enqueues one job per locale in ascending locale
order.  Jobs carry identifiers only and re-read content when they run.

Operations:

- ``publish_async``       -- live publish, one job per locale.
- ``publish_draft_async`` -- same fan-out to the draft endpoint.
- ``republish_async``     -- publish with ``republish`` update type;
  only for publicly visible content.
- ``schedule_async``      -- publish intents plus "coming soon" items.
- ``unschedule_async``    -- remove publish intents plus "gone" items.
- ``publish_redirect``    -- synchronous redirect upsert.

Each async operation returns a ``DispatchResult``.  A deliberate no-op
carries a ``skip_reason`` and is logged at INFO so it can be told apart
from a dispatch that produced work.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .core.client import PublishingApiClient
from .errors import EnqueueFailure, UnpublishableStateError
from .jobs.models import JobKind, SyncJob
from .jobs.queue import JobQueue
from .models import ContentItem, Organisation, Redirect, Unpublishing
from .presenters import (
    DEFAULT_PUBLISHING_APP,
    present_redirect,
    public_document_path,
)
from .visibility import VisibilityPolicy

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_TYPE = "major"
REPUBLISH_UPDATE_TYPE = "republish"


class SkipReason(str, Enum):
    """Why a dispatch produced no jobs."""

    UNTRACKED_TYPE = "untracked_type"
    FIRST_EXTERNAL_VERSION = "first_external_version"


class DispatchResult(BaseModel):
    """Jobs enqueued by one dispatch operation.

    Attributes:
        operation: Name of the operation, e.g. ``publish``.
        jobs: Jobs enqueued, in enqueue order.
        skip_reason: Set when the operation was a deliberate no-op.
    """

    operation: str
    jobs: list[SyncJob] = []
    skip_reason: SkipReason | None = None

    model_config = {"frozen": True}

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None


class PublishingApi:
    """Orchestrate publishing API synchronisation for content changes.

    Args:
        queue: Job substrate that receives deferred work.
        client: Publishing API client, used directly only for redirects.
        policy: Visibility policy; defaults to the built-in format set.
        default_queue: Queue name used when a caller does not pass one.
        publishing_app: ``publishing_app`` sent with redirects.
    """

    def __init__(
        self,
        queue: JobQueue,
        client: PublishingApiClient,
        policy: VisibilityPolicy | None = None,
        default_queue: str = "publishing_api",
        publishing_app: str = DEFAULT_PUBLISHING_APP,
    ) -> None:
        self.queue = queue
        self.client = client
        self.policy = policy or VisibilityPolicy()
        self.default_queue = default_queue
        self.publishing_app = publishing_app

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish_async(
        self,
        entity: ContentItem | Organisation | Unpublishing,
        update_type: str | None = None,
        queue: str | None = None,
    ) -> DispatchResult:
        """Enqueue a live publish of every translation of *entity*."""
        return self._fan_out(
            "publish",
            JobKind.PUBLISH,
            entity,
            DEFAULT_UPDATE_TYPE if update_type is None else update_type,
            queue,
        )

    def publish_draft_async(
        self,
        entity: ContentItem | Organisation | Unpublishing,
        update_type: str | None = None,
        queue: str | None = None,
    ) -> DispatchResult:
        """Enqueue a draft publish of every translation of *entity*."""
        return self._fan_out(
            "publish_draft",
            JobKind.DRAFT,
            entity,
            DEFAULT_UPDATE_TYPE if update_type is None else update_type,
            queue,
        )

    def republish_async(
        self,
        entity: ContentItem | Organisation | Unpublishing,
        update_type: str | None = None,
        queue: str | None = None,
    ) -> DispatchResult:
        """Re-send publicly visible content without a new edition.

        Raises:
            UnpublishableStateError: If *entity* is not publicly visible.
                Nothing is enqueued.
        """
        if not self.policy.is_publicly_visible(entity):
            state = getattr(entity, "state", None)
            raise UnpublishableStateError(
                entity, state.value if state is not None else None
            )
        return self._fan_out(
            "republish",
            JobKind.PUBLISH,
            entity,
            REPUBLISH_UPDATE_TYPE if update_type is None else update_type,
            queue,
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule_async(
        self, item: ContentItem, queue: str | None = None
    ) -> DispatchResult:
        """Announce a scheduled edition to the content store.

        Skipped while the platform still serves the document itself,
        i.e. no edition of it has been tracked externally yet.

        Raises:
            ValueError: If *item* has no scheduled publication time.
        """
        if self.policy.is_first_external_version(item.document):
            return self._skip(
                "schedule", item, SkipReason.FIRST_EXTERNAL_VERSION
            )
        if item.scheduled_publication is None:
            raise ValueError(
                f"ContentItem {item.id} has no scheduled publication time"
            )

        queue_name = queue or self.default_queue
        locales = item.translation_locales
        jobs = [
            SyncJob(
                kind=JobKind.SCHEDULE,
                queue_name=queue_name,
                base_path=public_document_path(item, locale),
                publish_time=item.scheduled_publication,
            )
            for locale in locales
        ]
        jobs += [
            SyncJob(
                kind=JobKind.COMING_SOON,
                queue_name=queue_name,
                entity_class=type(item).__name__,
                entity_id=item.id,
                locale=locale,
            )
            for locale in locales
        ]
        return self._enqueue_all("schedule", item, queue_name, jobs)

    def unschedule_async(
        self, item: ContentItem, queue: str | None = None
    ) -> DispatchResult:
        """Withdraw the publish intents created by ``schedule_async``.

        Gated exactly like ``schedule_async``.
        """
        if self.policy.is_first_external_version(item.document):
            return self._skip(
                "unschedule", item, SkipReason.FIRST_EXTERNAL_VERSION
            )

        queue_name = queue or self.default_queue
        paths = [
            public_document_path(item, locale)
            for locale in item.translation_locales
        ]
        jobs = [
            SyncJob(
                kind=JobKind.UNSCHEDULE, queue_name=queue_name, base_path=path
            )
            for path in paths
        ]
        jobs += [
            SyncJob(kind=JobKind.GONE, queue_name=queue_name, base_path=path)
            for path in paths
        ]
        return self._enqueue_all("unschedule", item, queue_name, jobs)

    # ------------------------------------------------------------------
    # Redirects
    # ------------------------------------------------------------------

    def publish_redirect(
        self, redirect: Redirect, update_type: str = DEFAULT_UPDATE_TYPE
    ) -> dict[str, Any]:
        """Send *redirect* to the publishing API immediately.

        Client errors propagate to the caller; there is no retry here.
        """
        payload = present_redirect(
            redirect, update_type, publishing_app=self.publishing_app
        )
        logger.info(
            "Publishing redirect at %s (%d routes)",
            redirect.base_path,
            len(redirect.redirects),
        )
        return self.client.put_redirect(redirect.base_path, payload)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fan_out(
        self,
        operation: str,
        kind: JobKind,
        entity: ContentItem | Organisation | Unpublishing,
        update_type: str,
        queue: str | None,
    ) -> DispatchResult:
        if isinstance(
            entity, Unpublishing
        ) and not self.policy.is_externally_tracked(entity):
            return self._skip(operation, entity, SkipReason.UNTRACKED_TYPE)

        queue_name = queue or self.default_queue
        jobs = [
            SyncJob(
                kind=kind,
                queue_name=queue_name,
                entity_class=type(entity).__name__,
                entity_id=entity.id,
                update_type=update_type,
                locale=locale,
            )
            for locale in entity.translation_locales
        ]
        return self._enqueue_all(operation, entity, queue_name, jobs)

    def _enqueue_all(
        self,
        operation: str,
        entity: Any,
        queue_name: str,
        jobs: list[SyncJob],
    ) -> DispatchResult:
        for job in jobs:
            try:
                self.queue.enqueue(queue_name, job)
            except Exception as exc:
                raise EnqueueFailure(queue_name, str(exc)) from exc

        logger.debug(
            "%s %s %s: enqueued %d jobs on %s",
            operation,
            type(entity).__name__,
            entity.id,
            len(jobs),
            queue_name,
        )
        return DispatchResult(operation=operation, jobs=jobs)

    def _skip(
        self, operation: str, entity: Any, reason: SkipReason
    ) -> DispatchResult:
        logger.info(
            "Skipping %s of %s %s: %s",
            operation,
            type(entity).__name__,
            entity.id,
            reason.value,
        )
        return DispatchResult(operation=operation, skip_reason=reason)
