# ABOUTME: Unit tests for the catalog HTTP client.
# ABOUTME: Drives ShelfwiseHttpClient through a scripted httpx transport.

import time

import httpx
import pytest

from shelfwise.metadata import http as http_module
from shelfwise.metadata.http import (
    USER_AGENT,
    HttpClient,
    MetadataFetchError,
    ShelfwiseHttpClient,
)


class ScriptedTransport(httpx.BaseTransport):
    """Plays back a fixed sequence of responses, or raises one error for every request."""

    def __init__(
        self,
        script: list[httpx.Response] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._script = list(script or [])
        self._error = error
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        if self._script:
            return self._script.pop(0)
        return httpx.Response(200, json={"totalItems": 0})


def _client(transport: ScriptedTransport, **kwargs) -> ShelfwiseHttpClient:
    kwargs.setdefault("min_request_interval", 0.0)
    kwargs.setdefault("retry_delay", 0.0)
    return ShelfwiseHttpClient(transport=transport, **kwargs)


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record backoff sleeps instead of waiting."""
    recorded: list[float] = []
    monkeypatch.setattr(http_module.time, "sleep", recorded.append)
    return recorded


class TestShelfwiseHttpClient:
    """Tests for ShelfwiseHttpClient."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ShelfwiseHttpClient(), HttpClient)

    def test_decodes_json_and_sends_params(self) -> None:
        transport = ScriptedTransport()
        body = _client(transport).get(
            "https://www.googleapis.com/books/v1/volumes", params={"q": "isbn:9780441172719"}
        )

        assert body == {"totalItems": 0}
        request = transport.requests[0]
        assert request.url.params["q"] == "isbn:9780441172719"
        assert request.headers["user-agent"] == USER_AGENT

    def test_requests_are_spaced_out(self) -> None:
        transport = ScriptedTransport()
        client = _client(transport, min_request_interval=0.15)

        start = time.monotonic()
        client.get("https://openlibrary.org/api/books")
        client.get("https://openlibrary.org/isbn/9780441172719.json")

        assert time.monotonic() - start >= 0.14
        assert len(transport.requests) == 2

    def test_not_found_is_not_retried(self, sleeps: list[float]) -> None:
        transport = ScriptedTransport([httpx.Response(404)])

        with pytest.raises(MetadataFetchError, match="HTTP 404"):
            _client(transport).get("https://openlibrary.org/isbn/0000000000.json")
        assert len(transport.requests) == 1
        assert sleeps == []

    def test_quota_response_is_retried(self, sleeps: list[float]) -> None:
        transport = ScriptedTransport(
            [httpx.Response(429), httpx.Response(200, json={"items": []})]
        )
        client = _client(transport, retry_delay=0.5)

        assert client.get("https://www.googleapis.com/books/v1/volumes") == {"items": []}
        assert len(transport.requests) == 2
        assert sleeps == [0.5]

    def test_backoff_doubles(self, sleeps: list[float]) -> None:
        transport = ScriptedTransport([httpx.Response(503) for _ in range(3)])
        client = _client(transport, max_retries=2, retry_delay=1.0)

        with pytest.raises(MetadataFetchError, match="HTTP 503 .* after 3 attempts"):
            client.get("https://openlibrary.org/search.json")
        assert len(transport.requests) == 3
        assert sleeps == [1.0, 2.0]

    def test_retry_after_header_wins(self, sleeps: list[float]) -> None:
        transport = ScriptedTransport(
            [httpx.Response(429, headers={"Retry-After": "3"}), httpx.Response(200, json={})]
        )
        _client(transport, retry_delay=1.0).get("https://www.googleapis.com/books/v1/volumes")
        assert sleeps == [3.0]

    def test_timeout(self) -> None:
        transport = ScriptedTransport(error=httpx.ReadTimeout("slow catalog"))
        with pytest.raises(MetadataFetchError, match="timed out"):
            _client(transport).get("https://openlibrary.org/api/books")

    def test_connection_refused(self) -> None:
        transport = ScriptedTransport(error=httpx.ConnectError("refused"))
        with pytest.raises(MetadataFetchError, match="Request failed"):
            _client(transport).get("https://openlibrary.org/api/books")

    def test_html_error_page_is_rejected(self) -> None:
        transport = ScriptedTransport([httpx.Response(200, text="<html>maintenance</html>")])
        with pytest.raises(MetadataFetchError, match="Invalid JSON"):
            _client(transport).get("https://openlibrary.org/api/books")
