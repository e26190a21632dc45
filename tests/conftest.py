"""Shared pytest fixtures for publishing-sync tests."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from publishing_sync.config import Config
from publishing_sync.content_source import InMemoryContentSource
from publishing_sync.dispatch import PublishingApi
from publishing_sync.errors import TransientDeliveryError
from publishing_sync.jobs.queue import InMemoryJobQueue
from publishing_sync.jobs.workers import JobExecutor
from publishing_sync.models import (
    ContentItem,
    Document,
    EditionState,
    Translation,
)
from publishing_sync.visibility import VisibilityPolicy

SCHEDULED_AT = datetime(2026, 11, 1, 9, 30, tzinfo=timezone.utc)

_ids = itertools.count(1)


class FakePublishingApiClient:
    """In-memory stand-in for ``PublishingApiClient``.

    Stores the last payload per path for each endpoint, like the real
    upsert semantics, and records every call in order.
    """

    def __init__(self, failures: Optional[Dict[str, int]] = None) -> None:
        self.content: Dict[str, dict] = {}
        self.draft_content: Dict[str, dict] = {}
        self.intents: Dict[str, dict] = {}
        self.calls: List[tuple] = []
        # path -> number of transient failures to raise before succeeding
        self.failures: Dict[str, int] = dict(failures or {})

    def _maybe_fail(self, path: str) -> None:
        remaining = self.failures.get(path, 0)
        if remaining > 0:
            self.failures[path] = remaining - 1
            raise TransientDeliveryError(
                f"PUT {path} returned 503", path=path, status_code=503
            )

    def put_content(self, base_path: str, payload: dict) -> dict:
        self.calls.append(("put_content", base_path, payload))
        self._maybe_fail(base_path)
        self.content[base_path] = payload
        return {}

    def put_draft_content(self, base_path: str, payload: dict) -> dict:
        self.calls.append(("put_draft_content", base_path, payload))
        self._maybe_fail(base_path)
        self.draft_content[base_path] = payload
        return {}

    def put_redirect(self, base_path: str, payload: dict) -> dict:
        self.calls.append(("put_redirect", base_path, payload))
        self._maybe_fail(base_path)
        self.content[base_path] = payload
        return {}

    def put_intent(self, base_path: str, payload: dict) -> dict:
        self.calls.append(("put_intent", base_path, payload))
        self._maybe_fail(base_path)
        self.intents[base_path] = payload
        return {}

    def destroy_intent(self, base_path: str) -> dict:
        self.calls.append(("destroy_intent", base_path, None))
        self._maybe_fail(base_path)
        self.intents.pop(base_path, None)
        return {}

    def calls_to(self, method: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == method]


def make_document(
    content_type: str = "case_study", slug: str | None = None
) -> Document:
    doc_id = next(_ids)
    return Document(
        id=doc_id,
        slug=slug or f"document-{doc_id}",
        content_type=content_type,
        content_id=f"00000000-0000-0000-0000-{doc_id:012d}",
    )


def make_item(
    document: Document | None = None,
    state: EditionState = EditionState.PUBLISHED,
    locales: tuple[str, ...] = ("en",),
    content_type: str = "case_study",
    **kwargs: Any,
) -> ContentItem:
    document = document or make_document(content_type)
    translations = {
        locale: Translation(
            title=f"Title ({locale})",
            summary=f"Summary ({locale})",
            body=f"Body ({locale})",
        )
        for locale in locales
    }
    return ContentItem(
        id=next(_ids),
        document=document,
        state=state,
        translations=translations,
        **kwargs,
    )


@pytest.fixture
def mock_config():
    """Create a Config instance for testing."""
    return Config(
        publishing_api_url="https://publishing-api.example.com",
        bearer_token="test-token",
        insecure=False,
    )


@pytest.fixture
def fake_client():
    return FakePublishingApiClient()


@pytest.fixture
def queue():
    return InMemoryJobQueue()


@pytest.fixture
def content_source():
    return InMemoryContentSource()


@pytest.fixture
def policy():
    return VisibilityPolicy()


@pytest.fixture
def publishing_api(queue, fake_client, policy):
    return PublishingApi(
        queue=queue,
        client=fake_client,  # type: ignore[arg-type]
        policy=policy,
    )


@pytest.fixture
def executor(fake_client, content_source):
    return JobExecutor(fake_client, content_source)  # type: ignore[arg-type]
