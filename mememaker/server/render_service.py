"""Render service tying source fetching and rendering together.

Each call owns its own canvas, so any number of renders may run concurrently.
Pillow work runs in a worker thread to keep the event loop free while other
requests wait on their source downloads.
"""

import asyncio
import time

from mememaker.common.config import RendererConfig
from mememaker.common.logging import get_logger
from mememaker.common.models import RenderRequest
from mememaker.renderer.errors import RenderError
from mememaker.renderer.meme import render_meme
from mememaker.renderer.text_image import render_text_image
from mememaker.server.source_client import SourceImageClient

logger = get_logger(__name__)


class RenderService:
    """Service for rendering text images and memes from route requests."""

    def __init__(
        self,
        renderer_config: RendererConfig | None = None,
        source_client: SourceImageClient | None = None,
    ) -> None:
        self.renderer_config = renderer_config or RendererConfig()
        self.source_client = source_client or SourceImageClient()

    async def text_image(self, text: str) -> bytes:
        """Render ``text`` onto a blank canvas sized to fit it."""
        logger.debug("Rendering text image", {"text": text})
        started = time.perf_counter()
        try:
            image = await asyncio.to_thread(render_text_image, text, self.renderer_config)
        except RenderError as e:
            logger.error("Text image render failed", {"text": text, "error": str(e)})
            raise

        logger.info(
            "Rendered text image",
            {"text": text, "bytes": len(image), "duration_ms": _elapsed_ms(started)},
        )
        return image

    async def meme(self, request: RenderRequest) -> bytes | None:
        """Fetch the request's source image and caption it.

        Args:
            request: RenderRequest with caption text and source URL

        Returns:
            JPEG bytes, or None when the request has no source URL (nothing
            is fetched in that case)

        Raises:
            ImageFetchError: When the source cannot be downloaded
            ImageDecodeError: When the downloaded bytes are not an image
            EncodeError: When the result cannot be encoded
        """
        if not request.has_source:
            logger.info("Meme request without source image", {"text": request.text})
            return None

        logger.debug("Rendering meme", {"text": request.text, "url": request.url})
        started = time.perf_counter()
        try:
            source = await self.source_client.fetch(request.url)
            image = await asyncio.to_thread(
                render_meme, request.text, source, self.renderer_config
            )
        except RenderError as e:
            logger.error(
                "Meme render failed",
                {
                    "text": request.text,
                    "url": request.url,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            raise

        logger.info(
            "Rendered meme",
            {
                "text": request.text,
                "url": request.url,
                "bytes": len(image),
                "duration_ms": _elapsed_ms(started),
            },
        )
        return image


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
