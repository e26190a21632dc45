"""Visibility policy: which content is public and which the content store tracks.

``is_publicly_visible`` depends only on lifecycle state.  Tracking
depends on a configured set of content types whose public pages the
platform still renders itself; those types never get publish or
unpublish calls.  ``is_first_external_version`` is derived from the
document's version history every time it is asked, never stored; an
edition that was public and later unpublished is part of that history.
"""

from __future__ import annotations

from collections.abc import Iterable

from .config import DEFAULT_SERVED_LOCALLY_FORMATS
from .models import (
    ContentItem,
    Document,
    EditionState,
    Organisation,
    Redirect,
    Unpublishing,
)

PUBLICLY_VISIBLE_STATES = frozenset(
    {
        EditionState.PUBLISHED,
        EditionState.ARCHIVED,
        EditionState.WITHDRAWN,
    }
)


def is_publicly_visible(
    entity: ContentItem | Organisation | Unpublishing | Redirect,
) -> bool:
    """Return True if *entity* may be republished.

    Editions are visible only when published, archived or withdrawn.
    Organisations have no lifecycle and an unpublishing is itself the
    public record of a removal, so both are always visible.
    """
    if isinstance(entity, ContentItem):
        return entity.state in PUBLICLY_VISIBLE_STATES
    return True


class VisibilityPolicy:
    """Answers tracking questions for a configured set of local formats.

    Args:
        served_locally_formats: Content types rendered by the platform
            itself rather than by the external content store.
    """

    def __init__(
        self,
        served_locally_formats: Iterable[str] = DEFAULT_SERVED_LOCALLY_FORMATS,
    ) -> None:
        self.served_locally_formats = frozenset(served_locally_formats)

    is_publicly_visible = staticmethod(is_publicly_visible)

    def is_externally_tracked(
        self,
        entity_or_type: str | ContentItem | Organisation | Unpublishing,
    ) -> bool:
        """Return False for content types the platform serves itself."""
        if isinstance(entity_or_type, str):
            content_type = entity_or_type
        else:
            content_type = entity_or_type.content_type
        return content_type not in self.served_locally_formats

    def is_tracked_by_external_store(self, item: ContentItem) -> bool:
        """True once *item* has been made public through the content store.

        An unpublished edition still counts: the store keeps serving its
        unpublishing in place of the content.
        """
        if not self.is_externally_tracked(item):
            return False
        return is_publicly_visible(item) or item.unpublishing is not None

    def is_first_external_version(self, document: Document) -> bool:
        """True when no edition of *document* has been tracked externally."""
        return not any(
            self.is_tracked_by_external_store(edition)
            for edition in document.editions
        )
