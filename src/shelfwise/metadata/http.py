# ABOUTME: HTTP client abstraction for catalog API calls.
# ABOUTME: Bounded timeouts, shared rate limiting, retry with backoff, and an injectable transport.

import logging
import threading
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

# Google Books answers 429 when the shared anonymous quota runs out.
_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "shelfwise/0.1.0"


class MetadataFetchError(Exception):
    """Raised when a request to a catalog fails or returns an unusable payload."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP GET operations against catalog APIs."""

    def get(self, url: str, params: dict[str, str] | None = None) -> Any: ...


class ShelfwiseHttpClient:
    """Catalog HTTP client shared by every source in a resolver.

    One instance may serve both catalogs from two threads at once, so the
    request interval is tracked under a lock. Every request is bounded by
    `timeout`; a stalled catalog surfaces as MetadataFetchError.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        min_request_interval: float = 0.1,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        options: dict[str, Any] = {
            "headers": {"User-Agent": USER_AGENT},
            "timeout": timeout,
            "follow_redirects": True,
        }
        if transport is not None:
            options["transport"] = transport
        self._client = httpx.Client(**options)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._next_request_at = 0.0
        self._lock = threading.Lock()

    def get(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET a catalog URL and decode its JSON body.

        Retries 429 and 5xx responses up to `max_retries` times with
        exponential backoff, honouring a numeric Retry-After header.

        Raises:
            MetadataFetchError: On timeouts, transport errors, non-retryable
                statuses, exhausted retries, or a body that is not JSON.
        """
        response = self._send(url, params)
        for retry in range(1, self._max_retries + 1):
            if response.status_code not in _RETRYABLE_STATUS_CODES:
                break
            wait = self._backoff(response, retry)
            logger.warning(
                "HTTP %d from %s, retry %d/%d in %.1fs",
                response.status_code,
                url,
                retry,
                self._max_retries,
                wait,
            )
            time.sleep(wait)
            response = self._send(url, params)

        status = response.status_code
        if status in _RETRYABLE_STATUS_CODES:
            raise MetadataFetchError(
                f"HTTP {status} from {url} after {1 + self._max_retries} attempts"
            )
        if status != 200:
            raise MetadataFetchError(f"HTTP {status} from {url}")

        try:
            return response.json()
        except ValueError as exc:
            raise MetadataFetchError(f"Invalid JSON from {url}") from exc

    def close(self) -> None:
        self._client.close()

    def _send(self, url: str, params: dict[str, str] | None) -> httpx.Response:
        self._wait_for_slot()
        try:
            return self._client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise MetadataFetchError(f"Request timed out: {url}") from exc
        except httpx.HTTPError as exc:
            raise MetadataFetchError(f"Request failed: {url}: {exc}") from exc

    def _backoff(self, response: httpx.Response, retry: int) -> float:
        retry_after = response.headers.get("Retry-After", "")
        if retry_after.isdigit():
            return float(retry_after)
        return self._retry_delay * (2 ** (retry - 1))

    def _wait_for_slot(self) -> None:
        """Block until min_request_interval has passed since the previous request."""
        if self._min_interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            if now < self._next_request_at:
                time.sleep(self._next_request_at - now)
                now = self._next_request_at
            self._next_request_at = now + self._min_interval
