"""Exception types raised by the publishing sync engine.

Precondition failures are raised synchronously to the caller of a
dispatch operation.  Delivery failures are raised inside job execution
and are consumed by the job runner's retry policy.
"""


class PublishingSyncError(Exception):
    """Base class for all publishing sync errors."""


class UnpublishableStateError(PublishingSyncError):
    """Raised when republishing an entity that is not publicly visible."""

    def __init__(self, entity: object, state: str | None = None) -> None:
        self.entity = entity
        self.state = state
        label = f"{type(entity).__name__} {getattr(entity, 'id', '?')}"
        if state:
            message = f"{label} is not publicly visible (state: {state})"
        else:
            message = f"{label} is not publicly visible"
        super().__init__(message)


class EnqueueFailure(PublishingSyncError):
    """Raised when the job substrate rejects an enqueue.

    Jobs enqueued earlier in the same fan-out are not rolled back.
    """

    def __init__(self, queue_name: str, message: str) -> None:
        self.queue_name = queue_name
        super().__init__(f"Failed to enqueue on '{queue_name}': {message}")


class DeliveryError(PublishingSyncError):
    """Base class for errors talking to the publishing API."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.path = path
        self.status_code = status_code
        super().__init__(message)


class TransientDeliveryError(DeliveryError):
    """Recoverable failure (network error, timeout, 429, 5xx). Safe to retry."""


class DeliveryRejectedError(DeliveryError):
    """The publishing API rejected the request (4xx). Retrying will not help."""
