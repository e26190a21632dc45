"""Read access to content entities by class name and id.

Job executors only carry identifiers, so they go through a
``ContentSource`` to fetch the current state of an entity when they run.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    """Lookup interface backed by the owning application's storage."""

    def find(self, entity_class: str, entity_id: int) -> Any | None:
        """Return the entity, or ``None`` if it no longer exists."""
        ...


class InMemoryContentSource:
    """Dict-backed ``ContentSource`` keyed by ``(class name, id)``.

    Used by the CLI, tests, and embedding applications that hold their
    content in process.  Safe to read from worker threads.
    """

    def __init__(self, entities: list[Any] | None = None) -> None:
        self._entities: dict[tuple[str, int], Any] = {}
        self._lock = threading.Lock()
        for entity in entities or []:
            self.add(entity)

    def add(self, entity: Any) -> None:
        key = (type(entity).__name__, entity.id)
        with self._lock:
            self._entities[key] = entity

    def remove(self, entity: Any) -> None:
        """Forget *entity*. No-op if it was never added."""
        with self._lock:
            self._entities.pop((type(entity).__name__, entity.id), None)

    def find(self, entity_class: str, entity_id: int) -> Any | None:
        with self._lock:
            entity = self._entities.get((entity_class, entity_id))
        if entity is None:
            logger.debug("No %s with id %s", entity_class, entity_id)
        return entity
