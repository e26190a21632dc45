"""Publishing API client and thread helpers used by the job runner."""

from .async_utils import gather_limited, make_semaphore, run_sync_limited
from .client import PublishingApiClient

__all__ = [
    "PublishingApiClient",
    "gather_limited",
    "make_semaphore",
    "run_sync_limited",
]
