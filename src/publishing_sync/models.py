"""Content entities read by the publishing sync engine.

The CRUD layer owns these objects; the engine only reads them.  Editions
and documents are plain dataclasses because the owning application
mutates them between dispatch and job execution.  ``Redirect`` is a
frozen value object.

- ``Document``: stable identity shared by every edition.
- ``ContentItem``: one edition of a document, with per-locale translations.
- ``Organisation``: translatable model without a publishing lifecycle.
- ``Unpublishing``: removal record attached to a previously public edition.
- ``Redirect`` / ``RouteEntry``: ad-hoc redirect published synchronously.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel


class EditionState(str, Enum):
    """Lifecycle states of an edition."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    REJECTED = "rejected"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    WITHDRAWN = "withdrawn"


@dataclass(frozen=True)
class Translation:
    """Translated fields of a content entity for one locale."""

    title: str
    summary: str = ""
    body: str = ""


def _sorted_locales(translations: dict[str, Translation]) -> list[str]:
    return sorted(translations)


def _translation_for(
    translations: dict[str, Translation],
    primary_locale: str,
    locale: str,
) -> Translation:
    if locale in translations:
        return translations[locale]
    if primary_locale in translations:
        return translations[primary_locale]
    return Translation(title="")


@dataclass(eq=False)
class Document:
    """Identity shared by all editions of a piece of content.

    Attributes:
        id: Database identifier.
        slug: URL slug, stable across editions.
        content_type: Format name, e.g. ``case_study``.
        content_id: UUID used as the external content identifier.
        editions: Version history, oldest first.
    """

    id: int
    slug: str
    content_type: str
    content_id: str
    editions: list[ContentItem] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class ContentItem:
    """A single edition of a ``Document``.

    Creating an edition appends it to its document's history.  An edition
    with no translations has no locales and fans out to nothing.
    ``unpublishing`` is set when an ``Unpublishing`` is recorded for it.
    """

    id: int
    document: Document
    state: EditionState = EditionState.DRAFT
    primary_locale: str = "en"
    translations: dict[str, Translation] = field(default_factory=dict)
    scheduled_publication: datetime | None = None
    public_updated_at: datetime | None = None
    unpublishing: Unpublishing | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not any(e is self for e in self.document.editions):
            self.document.editions.append(self)

    @property
    def document_id(self) -> int:
        return self.document.id

    @property
    def content_type(self) -> str:
        return self.document.content_type

    @property
    def content_id(self) -> str:
        return self.document.content_id

    @property
    def slug(self) -> str:
        return self.document.slug

    @property
    def translation_locales(self) -> list[str]:
        """Locales with a translation, ascending by locale code."""
        return _sorted_locales(self.translations)

    def translation_for(self, locale: str) -> Translation:
        """Return the translation for *locale*, falling back to the primary one."""
        return _translation_for(
            self.translations, self.primary_locale, locale
        )


@dataclass(eq=False)
class Organisation:
    """Translatable organisation page. Always public, no lifecycle."""

    id: int
    slug: str
    content_id: str
    primary_locale: str = "en"
    translations: dict[str, Translation] = field(default_factory=dict)
    public_updated_at: datetime | None = None

    content_type = "organisation"

    @property
    def translation_locales(self) -> list[str]:
        return _sorted_locales(self.translations)

    def translation_for(self, locale: str) -> Translation:
        return _translation_for(
            self.translations, self.primary_locale, locale
        )


@dataclass(eq=False)
class Unpublishing:
    """Record of a previously public edition being taken down.

    Attributes:
        id: Database identifier.
        edition: The edition that was removed.  Creating the record marks
            the edition as unpublished.
        explanation: Public explanation shown in place of the content.
        alternative_url: Where readers should go instead, if anywhere.
        redirect: If true, readers are redirected to ``alternative_url``.
        unpublished_at: When the removal happened.
    """

    id: int
    edition: ContentItem
    explanation: str = ""
    alternative_url: str | None = None
    redirect: bool = False
    unpublished_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        self.edition.unpublishing = self

    @property
    def document(self) -> Document:
        return self.edition.document

    @property
    def content_type(self) -> str:
        return self.edition.content_type

    @property
    def primary_locale(self) -> str:
        return self.edition.primary_locale

    @property
    def translation_locales(self) -> list[str]:
        return self.edition.translation_locales


class RouteEntry(BaseModel):
    """One redirect route: requests matching *path* go to *destination*."""

    path: str
    type: Literal["exact", "prefix"] = "exact"
    destination: str

    model_config = {"frozen": True}


class Redirect(BaseModel):
    """A set of redirect routes published under one base path."""

    base_path: str
    redirects: list[RouteEntry]

    model_config = {"frozen": True}
