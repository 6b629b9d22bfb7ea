"""Microlink API-based unfurler."""

import time
from typing import Any

import httpx
import structlog

from link_metadata.exceptions import (
    UnfurlConnectionError,
    UnfurlError,
    UnfurlHTTPError,
    UnfurlPayloadError,
)
from link_metadata.models.metadata import LinkMetadata
from link_metadata.utils.text import clip
from link_metadata.utils.urls import domain_of

logger = structlog.get_logger(__name__)

MICROLINK_BASE_URL = "https://api.microlink.io/"


def _asset_url(value: Any) -> str:
    """Pull the URL out of a Microlink asset object ({"url": ...})."""
    if isinstance(value, dict):
        url = value.get("url")
        return url if isinstance(url, str) else ""
    if isinstance(value, str):
        return value
    return ""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class MicrolinkUnfurler:
    """
    Microlink API-based unfurler.

    Asks Microlink for a page's title, description, image and publisher with
    media probing disabled. Works without an API key on the free tier.

    https://microlink.io/docs/api/getting-started/overview
    """

    def __init__(
        self,
        endpoint: str = MICROLINK_BASE_URL,
        api_key: str | None = None,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        title_max_length: int = 200,
        description_max_length: int = 300,
        verify: bool | str = True,
    ) -> None:
        """
        Initialize the Microlink unfurler.

        Args:
            endpoint: Unfurl API endpoint
            api_key: Microlink Pro API key (optional)
            timeout_seconds: Request timeout for a client created here
            http_client: Shared HTTP client (optional, not closed by this unfurler)
            title_max_length: Titles are trimmed and cut to this many characters
            description_max_length: Descriptions are trimmed and cut to this many characters
            verify: httpx ``verify`` value for a client created here
        """
        self._endpoint = endpoint
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._http_client = http_client
        self._owns_client = http_client is None
        self._verify = verify
        self.title_max_length = title_max_length
        self.description_max_length = description_max_length

    @property
    def name(self) -> str:
        """Return the unfurler name."""
        return "microlink"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or lazily create the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=float(self._timeout),
                verify=self._verify,
                follow_redirects=True,
            )
        return self._http_client

    async def fetch(self, url: str) -> LinkMetadata:
        """
        Unfurl a URL through Microlink.

        Args:
            url: URL to unfurl

        Returns:
            Populated metadata, or the fallback record on any failure
        """
        start_time = time.monotonic()
        logger.debug("unfurl_start", url=url, unfurler=self.name)

        try:
            data = await self._request(url)
            metadata = self.parse(url, data)
        except UnfurlError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.warning("unfurl_failed", url=url, error=e.message, elapsed_ms=elapsed_ms)
            return LinkMetadata.fallback(url)
        except Exception as e:
            logger.exception("unfurl_unexpected_error", url=url, error=str(e))
            return LinkMetadata.fallback(url)

        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.info("unfurl_done", url=url, title=metadata.title, elapsed_ms=elapsed_ms)
        return metadata

    async def _request(self, url: str) -> dict[str, Any]:
        """
        Call the Microlink API and return its ``data`` object.

        Raises:
            UnfurlConnectionError: Transport failure or timeout
            UnfurlHTTPError: Non-2xx response
            UnfurlPayloadError: Body is not JSON or has no ``data`` object
        """
        client = await self._get_client()

        params = {
            "url": url,
            "audio": "false",
            "video": "false",
            "iframe": "false",
        }
        headers = {
            "Accept": "application/json",
        }
        if self._api_key:
            headers["x-api-key"] = self._api_key

        try:
            response = await client.get(self._endpoint, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise UnfurlConnectionError(url, f"timed out ({e.__class__.__name__})") from e
        except httpx.RequestError as e:
            raise UnfurlConnectionError(url, str(e) or e.__class__.__name__) from e

        if not response.is_success:
            raise UnfurlHTTPError(url, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise UnfurlPayloadError(url, "response body is not JSON") from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise UnfurlPayloadError(url, "missing 'data' object")
        return data

    def parse(self, url: str, data: dict[str, Any]) -> LinkMetadata:
        """
        Normalize a Microlink ``data`` object into LinkMetadata.

        Args:
            url: URL the data describes (used for the site name fallback)
            data: The ``data`` object of a Microlink response

        Returns:
            Metadata with clipped title/description and resolved image
        """
        image = _asset_url(data.get("image")) or _asset_url(data.get("logo"))
        site_name = _text(data.get("publisher")) or domain_of(url)

        return LinkMetadata(
            title=clip(_text(data.get("title")), self.title_max_length),
            description=clip(_text(data.get("description")), self.description_max_length),
            image=image,
            site_name=site_name,
        )

    async def close(self) -> None:
        """Close the HTTP client if this unfurler created it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
