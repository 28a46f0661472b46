"""Client for fetching meme source images over HTTP.

Dependencies:
    - httpx: Async HTTP client for image downloads
"""

import httpx

from mememaker.common.api_exceptions import raise_for_httpx_status_error
from mememaker.common.config import FetchConfig
from mememaker.common.logging import get_logger
from mememaker.renderer.errors import ImageFetchError

logger = get_logger(__name__)


class SourceNotFoundError(ImageFetchError):
    """Raised when the source image URL does not exist (404, 410)."""


class SourceForbiddenError(ImageFetchError):
    """Raised when the source host refuses access to the image (401, 403)."""


class SourceUnavailableError(ImageFetchError):
    """Raised when the source host is temporarily unavailable (502, 503, 504)."""


_HTTPX_ERROR_MAP: dict[str, type[Exception]] = {
    "not_found": SourceNotFoundError,
    "forbidden": SourceForbiddenError,
    "transient": SourceUnavailableError,
}


class SourceImageClient:
    """Downloads source images for the meme renderer."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the source image client.

        Args:
            config: FetchConfig with timeout, size limit and user agent
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.config = config or FetchConfig()
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        """Download the raw bytes of a source image.

        There are no retries: a single failure fails the render.

        Args:
            url: Absolute http(s) URL of the image

        Returns:
            The response body

        Raises:
            SourceNotFoundError: When the image does not exist
            SourceForbiddenError: When the host denies access
            SourceUnavailableError: When the host answers 502, 503 or 504
            ImageFetchError: On other HTTP errors, timeouts, connection errors,
                unsupported URLs, or bodies larger than ``max_bytes``
        """
        headers = {"User-Agent": self.config.user_agent}

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=self.config.follow_redirects,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url, headers=headers) as response:
                    response.raise_for_status()
                    content = await self._read_limited(response, url)

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Source image request failed",
                {"url": url, "status_code": e.response.status_code},
            )
            raise_for_httpx_status_error(e, _HTTPX_ERROR_MAP, ImageFetchError, url_context=url)

        except httpx.TimeoutException as e:
            logger.warning("Source image request timed out", {"url": url})
            raise ImageFetchError(f"Timed out fetching {url}", url=url) from e

        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning("Source image request error", {"url": url, "error": str(e)})
            raise ImageFetchError(f"Could not fetch {url}: {e}", url=url) from e

        logger.info("Fetched source image", {"url": url, "bytes": len(content)})
        return content

    async def _read_limited(self, response: httpx.Response, url: str) -> bytes:
        limit = self.config.max_bytes
        declared = response.headers.get("Content-Length")
        if declared is not None and declared.isdigit() and int(declared) > limit:
            raise ImageFetchError(f"Source image exceeds {limit} bytes: {url}", url=url)

        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            if received > limit:
                raise ImageFetchError(f"Source image exceeds {limit} bytes: {url}", url=url)
            chunks.append(chunk)
        return b"".join(chunks)
