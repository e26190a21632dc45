"""Job executors: turn a ``SyncJob`` into a publishing API call.

Each execution re-reads the entity through the content source and
re-presents it, so running a job again (or late, or out of order)
sends the current state.  Network errors are not caught here; the
runner decides whether to retry.
"""

from __future__ import annotations

import logging

from ..content_source import ContentSource
from ..core.client import PublishingApiClient
from ..presenters import (
    DEFAULT_PUBLISHING_APP,
    DEFAULT_RENDERING_APP,
    present,
    present_coming_soon,
    present_gone,
    present_publish_intent,
)
from .models import JobKind, SyncJob

logger = logging.getLogger(__name__)


class JobExecutor:
    """Execute publishing jobs against a ``PublishingApiClient``.

    Args:
        client: Publishing API client.
        content_source: Lookup for entities referenced by jobs.
        publishing_app: Value for ``publishing_app`` in payloads.
        rendering_app: Value for ``rendering_app`` in payloads.
    """

    def __init__(
        self,
        client: PublishingApiClient,
        content_source: ContentSource,
        publishing_app: str = DEFAULT_PUBLISHING_APP,
        rendering_app: str = DEFAULT_RENDERING_APP,
    ) -> None:
        self.client = client
        self.content_source = content_source
        self.apps = {
            "publishing_app": publishing_app,
            "rendering_app": rendering_app,
        }

    def execute(self, job: SyncJob) -> None:
        """Run *job* once.

        Raises:
            TransientDeliveryError: If the publishing API call can be retried.
            DeliveryRejectedError: If the publishing API refused the call.
        """
        logger.debug("Executing %s", job.describe())
        match job.kind:
            case JobKind.PUBLISH:
                self._publish(job, draft=False)
            case JobKind.DRAFT:
                self._publish(job, draft=True)
            case JobKind.SCHEDULE:
                payload = present_publish_intent(
                    job.base_path, job.publish_time, **self.apps
                )
                self.client.put_intent(job.base_path, payload)
            case JobKind.UNSCHEDULE:
                self.client.destroy_intent(job.base_path)
            case JobKind.COMING_SOON:
                self._coming_soon(job)
            case JobKind.GONE:
                payload = present_gone(
                    job.base_path,
                    publishing_app=self.apps["publishing_app"],
                )
                self.client.put_content(job.base_path, payload)

    def _publish(self, job: SyncJob, draft: bool) -> None:
        entity = self.content_source.find(job.entity_class, job.entity_id)
        if entity is None:
            logger.warning(
                "Skipping %s: %s %s no longer exists",
                job.describe(),
                job.entity_class,
                job.entity_id,
            )
            return

        payload = present(entity, job.update_type, job.locale, **self.apps)
        base_path = payload["base_path"]
        if draft:
            self.client.put_draft_content(base_path, payload)
        else:
            self.client.put_content(base_path, payload)
        logger.info(
            "Sent %s %s to %s (%s)",
            "draft" if draft else "live",
            job.entity_class,
            base_path,
            job.update_type,
        )

    def _coming_soon(self, job: SyncJob) -> None:
        item = self.content_source.find(job.entity_class, job.entity_id)
        if item is None:
            logger.warning(
                "Skipping %s: %s %s no longer exists",
                job.describe(),
                job.entity_class,
                job.entity_id,
            )
            return

        payload = present_coming_soon(item, job.locale, **self.apps)
        self.client.put_content(payload["base_path"], payload)
