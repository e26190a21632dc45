"""Payload presenters for the publishing API.

Every function here is pure: the same entity state, update type and
locale always produce the same payload.  ``present()`` is the single
entry point used by job executors; it selects a presenter by entity kind.

Paths follow the public URL scheme ``/government/<prefix>/<slug>`` with
a ``.<locale>`` suffix for every locale other than the primary one.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from .models import (
    ContentItem,
    Organisation,
    Redirect,
    Unpublishing,
)
from .validators import validate_locale

DEFAULT_PUBLISHING_APP = "whitehall"
DEFAULT_RENDERING_APP = "government-frontend"

TYPE_PATH_PREFIXES: dict[str, str] = {
    "case_study": "case-studies",
    "consultation": "consultations",
    "detailed_guide": "guidance",
    "fatality_notice": "fatalities",
    "news_article": "news",
    "organisation": "organisations",
    "publication": "publications",
    "speech": "speeches",
    "statistical_data_set": "statistical-data-sets",
    "world_location_news_article": "world-location-news",
}

Payload = dict[str, Any]


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def type_path_prefix(content_type: str) -> str:
    """Return the URL segment for *content_type*, e.g. ``case-studies``."""
    prefix = TYPE_PATH_PREFIXES.get(content_type)
    if prefix is None:
        prefix = content_type.replace("_", "-") + "s"
    return prefix


def public_document_path(
    entity: ContentItem | Organisation | Unpublishing,
    locale: str | None = None,
) -> str:
    """Return the public path of the document behind *entity*.

    The path belongs to the document, not the edition, so every edition
    of a document shares it.  Non-primary locales get a ``.<locale>``
    suffix.

    Raises:
        ValueError: If *locale* is not a valid locale code.
    """
    if isinstance(entity, Unpublishing):
        entity = entity.edition

    path = f"/government/{type_path_prefix(entity.content_type)}/{entity.slug}"
    if locale is None or locale == entity.primary_locale:
        return path

    is_valid, error_msg = validate_locale(locale)
    if not is_valid:
        raise ValueError(error_msg)
    return f"{path}.{locale}"


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _exact_route(base_path: str) -> list[dict[str, str]]:
    return [{"path": base_path, "type": "exact"}]


def _destination_path(url: str) -> str:
    """Reduce an absolute URL to the path (and query) a redirect points at."""
    if url.startswith("/"):
        return url
    parsed = urlparse(url)
    path = parsed.path or "/"
    if parsed.query:
        path = f"{path}?{parsed.query}"
    return path


# ---------------------------------------------------------------------------
# Content presenters
# ---------------------------------------------------------------------------


def present_content_item(
    item: ContentItem,
    update_type: str = "major",
    locale: str | None = None,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
    rendering_app: str = DEFAULT_RENDERING_APP,
) -> Payload:
    locale = locale or item.primary_locale
    base_path = public_document_path(item, locale)
    translation = item.translation_for(locale)
    return {
        "content_id": item.content_id,
        "base_path": base_path,
        "title": translation.title,
        "description": translation.summary,
        "format": item.content_type,
        "locale": locale,
        "need_ids": [],
        "public_updated_at": _isoformat(item.public_updated_at),
        "update_type": update_type,
        "publishing_app": publishing_app,
        "rendering_app": rendering_app,
        "routes": _exact_route(base_path),
        "redirects": [],
        "details": {
            "body": translation.body,
            "state": item.state.value,
        },
    }


def present_organisation(
    organisation: Organisation,
    update_type: str = "major",
    locale: str | None = None,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
    rendering_app: str = DEFAULT_RENDERING_APP,
) -> Payload:
    locale = locale or organisation.primary_locale
    base_path = public_document_path(organisation, locale)
    translation = organisation.translation_for(locale)
    return {
        "content_id": organisation.content_id,
        "base_path": base_path,
        "title": translation.title,
        "description": translation.summary,
        "format": "placeholder_organisation",
        "locale": locale,
        "need_ids": [],
        "public_updated_at": _isoformat(organisation.public_updated_at),
        "update_type": update_type,
        "publishing_app": publishing_app,
        "rendering_app": rendering_app,
        "routes": _exact_route(base_path),
        "redirects": [],
        "details": {"body": translation.body},
    }


def present_unpublishing(
    unpublishing: Unpublishing,
    update_type: str = "major",
    locale: str | None = None,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
    rendering_app: str = DEFAULT_RENDERING_APP,
) -> Payload:
    """Present an unpublishing at the document's path for *locale*.

    Title and description come from the edition's current translation;
    the edition's own lifecycle state is ignored.  A redirecting
    unpublishing with an alternative URL becomes a redirect item.
    """
    edition = unpublishing.edition
    locale = locale or edition.primary_locale
    base_path = public_document_path(edition, locale)

    if unpublishing.redirect and unpublishing.alternative_url:
        return {
            "base_path": base_path,
            "format": "redirect",
            "publishing_app": publishing_app,
            "update_type": update_type,
            "redirects": [
                {
                    "path": base_path,
                    "type": "exact",
                    "destination": _destination_path(
                        unpublishing.alternative_url
                    ),
                }
            ],
        }

    translation = edition.translation_for(locale)
    return {
        "content_id": edition.content_id,
        "base_path": base_path,
        "title": translation.title,
        "description": translation.summary,
        "format": "unpublishing",
        "locale": locale,
        "need_ids": [],
        "public_updated_at": _isoformat(unpublishing.unpublished_at),
        "update_type": update_type,
        "publishing_app": publishing_app,
        "rendering_app": rendering_app,
        "routes": _exact_route(base_path),
        "redirects": [],
        "details": {
            "body": translation.body,
            "explanation": unpublishing.explanation,
            "unpublished_at": _isoformat(unpublishing.unpublished_at),
            "alternative_url": unpublishing.alternative_url,
        },
    }


def present_redirect(
    redirect: Redirect,
    update_type: str = "major",
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
) -> Payload:
    """Present a redirect; routes are passed through in order."""
    return {
        "base_path": redirect.base_path,
        "format": "redirect",
        "publishing_app": publishing_app,
        "update_type": update_type,
        "redirects": [entry.model_dump() for entry in redirect.redirects],
    }


# ---------------------------------------------------------------------------
# Scheduling presenters
# ---------------------------------------------------------------------------


def present_publish_intent(
    base_path: str,
    publish_time: datetime,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
    rendering_app: str = DEFAULT_RENDERING_APP,
) -> Payload:
    return {
        "publish_time": publish_time.isoformat(),
        "publishing_app": publishing_app,
        "rendering_app": rendering_app,
        "routes": _exact_route(base_path),
    }


def present_coming_soon(
    item: ContentItem,
    locale: str | None = None,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
    rendering_app: str = DEFAULT_RENDERING_APP,
) -> Payload:
    """Placeholder served at the public path until the scheduled time."""
    locale = locale or item.primary_locale
    base_path = public_document_path(item, locale)
    publish_time = _isoformat(item.scheduled_publication)
    return {
        "base_path": base_path,
        "title": "Coming soon",
        "description": "Coming soon",
        "format": "coming_soon",
        "locale": locale,
        "need_ids": [],
        "public_updated_at": publish_time,
        "update_type": "major",
        "publishing_app": publishing_app,
        "rendering_app": rendering_app,
        "routes": _exact_route(base_path),
        "redirects": [],
        "details": {"publish_time": publish_time},
    }


def present_gone(
    base_path: str,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
) -> Payload:
    return {
        "base_path": base_path,
        "format": "gone",
        "publishing_app": publishing_app,
        "update_type": "major",
        "routes": _exact_route(base_path),
    }


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def present(
    entity: ContentItem | Organisation | Unpublishing | Redirect,
    update_type: str = "major",
    locale: str | None = None,
    *,
    publishing_app: str = DEFAULT_PUBLISHING_APP,
    rendering_app: str = DEFAULT_RENDERING_APP,
) -> Payload:
    """Present *entity* for *locale* with the given update type.

    ``update_type`` is passed through verbatim.  Redirects ignore
    *locale*.

    Raises:
        TypeError: If no presenter exists for the entity's type.
    """
    apps = {"publishing_app": publishing_app, "rendering_app": rendering_app}
    match entity:
        case Redirect():
            return present_redirect(
                entity, update_type, publishing_app=publishing_app
            )
        case Unpublishing():
            return present_unpublishing(entity, update_type, locale, **apps)
        case ContentItem():
            return present_content_item(entity, update_type, locale, **apps)
        case Organisation():
            return present_organisation(entity, update_type, locale, **apps)
        case _:
            raise TypeError(
                f"No presenter for {type(entity).__name__}"
            )
