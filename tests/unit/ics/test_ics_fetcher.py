"""Unit tests for ICS fetcher functionality."""

from typing import Any, Callable, List

import httpx
import pytest

from calendarbot_ics.ics.exceptions import (
    ICSAuthError,
    ICSFetchError,
    ICSNetworkError,
    ICSTimeoutError,
)
from calendarbot_ics.ics.fetcher import MAX_BACKOFF_SECONDS, ICSFetcher
from calendarbot_ics.ics.models import AuthType, ICSAuth, ICSSource
from tests.fixtures.mock_ics_data import ICSDataFactory

ICS_URL = "https://calendar.example.com/team.ics"


def _mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def no_backoff(monkeypatch: Any) -> None:
    """Disable retry sleeps."""
    monkeypatch.setattr(ICSFetcher, "_backoff_delay", lambda self, attempt: 0.0)


@pytest.mark.unit
class TestICSFetcherHelpers:
    """Tests for synchronous fetcher helpers."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://calendar.example.com/a.ics", True),
            ("http://localhost:8080/a.ics", True),
            ("ftp://example.com/a.ics", False),
            ("file:///etc/passwd", False),
            ("https:///a.ics", False),
            ("calendar.ics", False),
        ],
    )
    def test_validate_url(self, test_settings: Any, url: str, expected: bool) -> None:
        assert ICSFetcher(test_settings)._validate_url(url) is expected

    def test_build_headers_when_basic_auth_then_authorization_and_custom_headers(
        self, test_settings: Any
    ) -> None:
        source = ICSSource(
            url=ICS_URL,
            auth=ICSAuth(type=AuthType.BASIC, username="user", password="pass"),
            custom_headers={"X-Team": "core"},
        )

        headers = ICSFetcher(test_settings)._build_headers(source)

        assert headers == {"Authorization": "Basic dXNlcjpwYXNz", "X-Team": "core"}

    def test_build_headers_when_bearer_auth_then_bearer_token(self, test_settings: Any) -> None:
        source = ICSSource(url=ICS_URL, auth=ICSAuth(type=AuthType.BEARER, bearer_token="tok"))

        headers = ICSFetcher(test_settings)._build_headers(source)

        assert headers == {"Authorization": "Bearer tok"}

    def test_backoff_delay_grows_and_is_capped(self, test_settings: Any) -> None:
        fetcher = ICSFetcher(test_settings)

        assert fetcher._backoff_delay(0) == 1.0
        assert fetcher._backoff_delay(2) == pytest.approx(2.25)
        assert fetcher._backoff_delay(100) == MAX_BACKOFF_SECONDS

    def test_init_when_no_settings_then_defaults(self) -> None:
        fetcher = ICSFetcher()

        assert fetcher.request_timeout == 30.0
        assert fetcher.max_retries == 3


@pytest.mark.unit
@pytest.mark.critical_path
class TestFetchICS:
    """Tests for fetch_ics."""

    @pytest.mark.asyncio
    async def test_fetch_when_ok_then_content_returned(self, test_settings: Any) -> None:
        seen: List[httpx.Request] = []
        body = ICSDataFactory.create_basic_ics(1)

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=body, headers={"Content-Type": "text/calendar"})

        async with _mock_client(handler) as client:
            fetcher = ICSFetcher(test_settings, client=client)
            response = await fetcher.fetch_ics(
                ICSSource(url=ICS_URL, custom_headers={"X-Team": "core"})
            )

        assert response.success is True
        assert response.content == body
        assert response.status_code == 200
        assert response.content_length == len(body.encode("utf-8"))
        assert seen[0].headers["X-Team"] == "core"

    @pytest.mark.asyncio
    async def test_fetch_when_invalid_url_then_failure_without_request(
        self, test_settings: Any
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        async with _mock_client(handler) as client:
            response = await ICSFetcher(test_settings, client=client).fetch_ics(
                ICSSource(url="ftp://example.com/a.ics")
            )

        assert response.success is False
        assert response.error_message == "Invalid ICS URL"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403])
    async def test_fetch_when_auth_rejected_then_raises(
        self, test_settings: Any, status_code: int
    ) -> None:
        async with _mock_client(lambda request: httpx.Response(status_code)) as client:
            fetcher = ICSFetcher(test_settings, client=client)

            with pytest.raises(ICSAuthError) as exc_info:
                await fetcher.fetch_ics(ICSSource(url=ICS_URL))

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_fetch_when_not_found_then_failure_response(self, test_settings: Any) -> None:
        async with _mock_client(lambda request: httpx.Response(404)) as client:
            response = await ICSFetcher(test_settings, client=client).fetch_ics(
                ICSSource(url=ICS_URL)
            )

        assert response.success is False
        assert response.status_code == 404
        assert response.error_message == "HTTP 404: Not Found"

    @pytest.mark.asyncio
    async def test_fetch_when_server_error_then_retried(
        self, test_settings: Any, no_backoff: None
    ) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 2:
                return httpx.Response(503)
            return httpx.Response(200, text="BEGIN:VCALENDAR\nEND:VCALENDAR")

        async with _mock_client(handler) as client:
            response = await ICSFetcher(test_settings, client=client).fetch_ics(
                ICSSource(url=ICS_URL)
            )

        assert response.success is True
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_fetch_when_server_error_persists_then_last_response_returned(
        self, test_settings: Any, no_backoff: None
    ) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        async with _mock_client(handler) as client:
            response = await ICSFetcher(test_settings, client=client).fetch_ics(
                ICSSource(url=ICS_URL)
            )

        assert response.success is False
        assert response.status_code == 500
        assert len(calls) == test_settings.max_retries + 1

    @pytest.mark.asyncio
    async def test_fetch_when_connection_fails_then_network_error(
        self, test_settings: Any, no_backoff: None
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _mock_client(handler) as client:
            fetcher = ICSFetcher(test_settings, client=client)

            with pytest.raises(ICSNetworkError, match="after 3 attempts"):
                await fetcher.fetch_ics(ICSSource(url=ICS_URL))

    @pytest.mark.asyncio
    async def test_fetch_when_timeouts_then_timeout_error(
        self, test_settings: Any, no_backoff: None
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _mock_client(handler) as client:
            fetcher = ICSFetcher(test_settings, client=client)

            with pytest.raises(ICSTimeoutError):
                await fetcher.fetch_ics(ICSSource(url=ICS_URL))


@pytest.mark.integration
class TestFetchAndParse:
    """Tests for fetch_and_parse."""

    @pytest.mark.asyncio
    async def test_fetch_and_parse_when_ok_then_parse_result(self, test_settings: Any) -> None:
        body = ICSDataFactory.create_basic_ics(2)

        async with _mock_client(lambda request: httpx.Response(200, text=body)) as client:
            result = await ICSFetcher(test_settings, client=client).fetch_and_parse(
                ICSSource(url=ICS_URL)
            )

        assert result.success is True
        assert result.event_count == 2
        assert result.source_url == ICS_URL

    @pytest.mark.asyncio
    async def test_fetch_and_parse_when_http_error_then_raises(self, test_settings: Any) -> None:
        async with _mock_client(lambda request: httpx.Response(404)) as client:
            fetcher = ICSFetcher(test_settings, client=client)

            with pytest.raises(ICSFetchError, match="HTTP 404") as exc_info:
                await fetcher.fetch_and_parse(ICSSource(url=ICS_URL))

        assert exc_info.value.status_code == 404


@pytest.mark.unit
class TestClientLifecycle:
    """Tests for HTTP client ownership."""

    @pytest.mark.asyncio
    async def test_context_manager_when_owned_client_then_closed(self, test_settings: Any) -> None:
        async with ICSFetcher(test_settings) as fetcher:
            client = fetcher.client
            assert client is not None
            assert client.headers["User-Agent"] == test_settings.user_agent

        assert client.is_closed
        assert fetcher.client is None

    @pytest.mark.asyncio
    async def test_close_when_shared_client_then_left_open(self, test_settings: Any) -> None:
        async with _mock_client(lambda request: httpx.Response(200)) as client:
            fetcher = ICSFetcher(test_settings, client=client)
            await fetcher.close()

            assert client.is_closed is False
            assert fetcher.client is client
