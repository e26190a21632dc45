import logging
import threading
from typing import Any

import requests

from ..config import Config
from ..errors import DeliveryRejectedError, TransientDeliveryError
from ..validators import validate_base_path

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class PublishingApiClient:
    """HTTP client for the publishing API.

    Every write is an idempotent upsert (or delete) keyed by base path,
    so callers may safely repeat any call.  Each worker thread gets its
    own ``requests.Session``.
    """

    def __init__(self, config: Config):
        self.config = config
        self._thread_local = threading.local()
        self.base_url = config.publishing_api_url.rstrip("/")

    @property
    def session(self) -> requests.Session:
        """Session for the current thread."""
        return self._get_session()

    def _get_session(self) -> requests.Session:
        """Get or create a thread-local requests.Session."""
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        if self.config.bearer_token:
            session.headers["Authorization"] = (
                f"Bearer {self.config.bearer_token}"
            )
        session.verify = not self.config.insecure
        return session

    def _url(self, endpoint: str, base_path: str) -> str:
        is_valid, error_msg = validate_base_path(base_path)
        if not is_valid:
            raise ValueError(f"Invalid base path: {error_msg}")
        return f"{self.base_url}/{endpoint}{base_path}"

    def _request(
        self,
        method: str,
        endpoint: str,
        base_path: str,
        payload: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> dict[str, Any]:
        """
        Send one request and decode the JSON response.

        Raises:
            ValueError: If base_path is invalid (nothing is sent).
            TransientDeliveryError: On connection errors, timeouts, 429 or 5xx.
            DeliveryRejectedError: On any other 4xx response.
        """
        url = self._url(endpoint, base_path)
        session = self._get_session()
        logger.debug("%s %s", method, url)

        try:
            response = session.request(
                method,
                url,
                json=payload,
                timeout=(
                    self.config.connect_timeout,
                    self.config.read_timeout,
                ),
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise TransientDeliveryError(
                f"{method} {base_path} failed: {exc}", path=base_path
            ) from exc

        status = response.status_code
        if allow_not_found and status == 404:
            return {}
        if status in RETRYABLE_STATUS_CODES:
            raise TransientDeliveryError(
                f"{method} {base_path} returned {status}",
                path=base_path,
                status_code=status,
            )
        if 400 <= status < 600:
            raise DeliveryRejectedError(
                f"{method} {base_path} rejected with {status}: {response.text[:500]}",
                path=base_path,
                status_code=status,
            )

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def put_content(
        self, base_path: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Upsert live content at base_path.
        """
        return self._request("PUT", "content", base_path, payload)

    def put_draft_content(
        self, base_path: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Upsert draft content at base_path (visible on the draft stack only).
        """
        return self._request("PUT", "draft-content", base_path, payload)

    def put_redirect(
        self, base_path: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Upsert a redirect item at base_path.
        """
        return self._request("PUT", "content", base_path, payload)

    def put_intent(
        self, base_path: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Register an intent to publish at base_path at a future time.
        """
        return self._request("PUT", "publish-intent", base_path, payload)

    def destroy_intent(self, base_path: str) -> dict[str, Any]:
        """
        Remove a publish intent. Removing an absent intent succeeds.
        """
        return self._request(
            "DELETE", "publish-intent", base_path, allow_not_found=True
        )
