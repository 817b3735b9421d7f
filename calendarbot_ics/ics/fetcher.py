"""HTTP client for downloading ICS calendar files."""

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from .exceptions import ICSAuthError, ICSFetchError, ICSNetworkError, ICSTimeoutError
from .models import ICSParseResult, ICSResponse, ICSSource
from .parser import ICSParser

logger = logging.getLogger(__name__)

# Backoff calculation constants
MAX_BACKOFF_SECONDS = 30.0

ICS_ACCEPT_HEADER = "text/calendar, text/plain;q=0.9, */*;q=0.5"


class ICSFetcher:
    """Async HTTP client for downloading ICS calendar files."""

    def __init__(self, settings: Any = None, client: Optional[httpx.AsyncClient] = None) -> None:
        """Initialize ICS fetcher.

        Args:
            settings: Application settings (timeouts, retries, user agent)
            client: Optional externally managed HTTP client; it is never closed
                by the fetcher
        """
        self.settings = settings
        self.client: Optional[httpx.AsyncClient] = client
        self._owns_client = client is None
        self.request_timeout: float = getattr(settings, "request_timeout", 30.0)
        self.max_retries: int = getattr(settings, "max_retries", 3)
        self.retry_backoff_factor: float = getattr(settings, "retry_backoff_factor", 1.5)
        self.user_agent: str = getattr(settings, "user_agent", "calendarbot-ics/1.0")

        logger.debug("ICS fetcher initialized (shared client: %s)", not self._owns_client)

    async def __aenter__(self) -> "ICSFetcher":
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client exists."""
        if self.client is None or self.client.is_closed:
            self.client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.request_timeout),
                follow_redirects=True,
                headers={"User-Agent": self.user_agent, "Accept": ICS_ACCEPT_HEADER},
            )
            self._owns_client = True
        return self.client

    async def close(self) -> None:
        """Close HTTP client if the fetcher created it."""
        if self.client is not None and self._owns_client and not self.client.is_closed:
            await self.client.aclose()
            logger.debug("Closed HTTP client")
        if self._owns_client:
            self.client = None

    def _validate_url(self, url: str) -> bool:
        """Allow only absolute http(s) URLs with a hostname."""
        parsed = urlparse(url)

        if parsed.scheme not in ("http", "https"):
            logger.debug("Blocked non-HTTP(S) URL: %s", url)
            return False

        if not parsed.hostname:
            logger.debug("Blocked URL with missing hostname: %s", url)
            return False

        return True

    def _build_headers(self, source: ICSSource) -> Dict[str, str]:
        headers = {}
        headers.update(source.auth.get_headers())
        headers.update(source.custom_headers)
        return headers

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff for the given zero-based attempt."""
        return float(min(self.retry_backoff_factor**attempt, MAX_BACKOFF_SECONDS))

    async def _make_request_with_retry(
        self, source: ICSSource, headers: Dict[str, str]
    ) -> httpx.Response:
        """Make HTTP request, retrying network errors and 5xx responses.

        Raises:
            ICSTimeoutError: If every attempt timed out
            ICSNetworkError: If every attempt failed at the network level
        """
        client = await self._ensure_client()
        timeout = source.timeout if source.timeout is not None else self.request_timeout
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            if attempt:
                delay = self._backoff_delay(attempt - 1)
                logger.debug("Retrying %s in %.1fs (attempt %d)", source.url, delay, attempt + 1)
                await asyncio.sleep(delay)

            try:
                response = await client.get(source.url, headers=headers, timeout=timeout)
            except httpx.TimeoutException as e:
                logger.warning("Timeout fetching %s: %s", source.url, e)
                last_error = e
                continue
            except httpx.TransportError as e:
                logger.warning("Network error fetching %s: %s", source.url, e)
                last_error = e
                continue

            if response.status_code >= 500 and attempt < self.max_retries:
                logger.warning("Server error %d from %s", response.status_code, source.url)
                continue
            return response

        attempts = self.max_retries + 1
        if isinstance(last_error, httpx.TimeoutException):
            raise ICSTimeoutError(
                f"Request to {source.url} timed out after {attempts} attempts"
            ) from last_error
        raise ICSNetworkError(
            f"Network error fetching {source.url} after {attempts} attempts: {last_error}"
        ) from last_error

    async def fetch_ics(self, source: ICSSource) -> ICSResponse:
        """Download ICS content from source.

        Args:
            source: ICS source configuration

        Returns:
            ICSResponse; ``success`` is False for blocked URLs and non-auth
            HTTP errors

        Raises:
            ICSAuthError: On HTTP 401/403
            ICSTimeoutError: If the request timed out on every attempt
            ICSNetworkError: If the request failed on every attempt
        """
        if not self._validate_url(source.url):
            logger.error("Refusing to fetch invalid URL: %s", source.url)
            return ICSResponse(success=False, error_message="Invalid ICS URL", status_code=None)

        logger.debug("Fetching ICS from %s", source.url)
        response = await self._make_request_with_retry(source, self._build_headers(source))

        if response.status_code in (401, 403):
            raise ICSAuthError(
                f"Authentication failed for {source.url}", status_code=response.status_code
            )

        if response.is_error:
            logger.error("HTTP %d fetching %s", response.status_code, source.url)
            return ICSResponse(
                success=False,
                status_code=response.status_code,
                headers=dict(response.headers),
                error_message=f"HTTP {response.status_code}: {response.reason_phrase}",
            )

        content = response.text
        logger.debug("Fetched %d characters from %s", len(content), source.url)
        return ICSResponse(
            success=True,
            content=content,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    async def fetch_and_parse(
        self, source: ICSSource, parser: Optional[ICSParser] = None
    ) -> ICSParseResult:
        """Fetch a source and parse its content.

        Raises:
            ICSFetchError: If the content could not be downloaded
        """
        response = await self.fetch_ics(source)
        if not response.success or response.content is None:
            raise ICSFetchError(
                response.error_message or f"Failed to fetch {source.url}",
                status_code=response.status_code,
            )

        parser = parser or ICSParser(self.settings)
        return parser.parse_ics_content(response.content, source_url=source.url)
