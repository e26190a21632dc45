"""Publishing sync engine.

Decides, for every content change, which payloads go to the publishing
API, for which locales, and whether to send them now or through
deferred jobs.

Usage example
-------------
::

    from publishing_sync.bootstrap import build_runtime, resolve_config

    runtime = build_runtime(resolve_config(), content_source=my_source)
    runtime.publishing_api.publish_async(edition)
    report = runtime.runner.run_pending(runtime.queue)
"""

__version__ = "0.1.0"

from .dispatch import DispatchResult, PublishingApi, SkipReason
from .errors import (
    DeliveryRejectedError,
    EnqueueFailure,
    PublishingSyncError,
    TransientDeliveryError,
    UnpublishableStateError,
)
from .models import (
    ContentItem,
    Document,
    EditionState,
    Organisation,
    Redirect,
    RouteEntry,
    Translation,
    Unpublishing,
)
from .presenters import present
from .visibility import VisibilityPolicy, is_publicly_visible

__all__ = [
    "ContentItem",
    "DeliveryRejectedError",
    "DispatchResult",
    "Document",
    "EditionState",
    "EnqueueFailure",
    "Organisation",
    "PublishingApi",
    "PublishingSyncError",
    "Redirect",
    "RouteEntry",
    "SkipReason",
    "TransientDeliveryError",
    "Translation",
    "UnpublishableStateError",
    "Unpublishing",
    "VisibilityPolicy",
    "__version__",
    "present",
    "is_publicly_visible",
]
