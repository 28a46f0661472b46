"""Meme renderer: captions composited over a source image.

The caption sits on a baseline 30 pixels above the bottom edge and is centred
horizontally, but never starts left of x=5. Both offsets are fixed and do not
adapt to the font size, so captions taller than the bottom margin run past
the edge of the image.

Dependencies:
    - PIL/Pillow: Source image decoding
"""

import math
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from mememaker.common.config import RendererConfig
from mememaker.renderer.canvas import Canvas
from mememaker.renderer.errors import ImageDecodeError
from mememaker.renderer.outline import draw_outlined_text

PLACEHOLDER_SIZE = (200, 200)
MIN_CAPTION_X = 5
CAPTION_BOTTOM_MARGIN = 30


def decode_image(data: bytes) -> Image.Image:
    """Decode raw image bytes into a fully loaded RGBA image.

    Sources larger than ``Image.MAX_IMAGE_PIXELS`` are refused before any
    pixel data is decoded; Pillow on its own only warns below twice that.

    Raises:
        ImageDecodeError: If Pillow cannot identify or decode the bytes, or the
            image exceeds the pixel limit
    """
    try:
        with Image.open(BytesIO(data)) as img:
            limit = Image.MAX_IMAGE_PIXELS
            if limit and img.width * img.height > limit:
                raise ImageDecodeError(
                    f"Source image is {img.width}x{img.height}, more than {limit} pixels"
                )
            img.load()
            return img.convert("RGBA")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        EOFError,
        ValueError,
    ) as e:
        raise ImageDecodeError(f"Could not decode source image ({len(data)} bytes): {e}") from e


def caption_anchor(width: int, height: int, text_width: float) -> tuple[int, int]:
    """Compute the baseline-left anchor of a meme caption.

    Examples:
        >>> caption_anchor(100, 100, 40.0)
        (30, 70)

        >>> caption_anchor(50, 100, 300.0)
        (5, 70)
    """
    center = math.floor((width - text_width) / 2)
    bottom = height - CAPTION_BOTTOM_MARGIN
    return max(center, MIN_CAPTION_X), bottom


def render_meme(
    text: str | None,
    source_image: bytes | None,
    config: RendererConfig | None = None,
) -> bytes | None:
    """Render text as a caption over a source image.

    Args:
        text: Caption text (a single line)
        source_image: Encoded source image bytes, or None when there is no source
        config: RendererConfig with font and encoding settings

    Returns:
        JPEG bytes with the source image's exact dimensions, or None when
        ``source_image`` is None

    Raises:
        ImageDecodeError: If the source bytes cannot be decoded
        EncodeError: If the canvas cannot be encoded
    """
    if source_image is None:
        return None
    if config is None:
        config = RendererConfig()
    if not text:
        text = ""

    image = decode_image(source_image)

    canvas = Canvas(*PLACEHOLDER_SIZE)
    context = canvas.get_context()

    context.font = config.font
    text_width = context.measure_text(text).width

    canvas.resize(image.width, image.height)
    # resizing dropped the font
    context.font = config.font

    x, y = caption_anchor(canvas.width, canvas.height, text_width)

    context.draw_image(image, 0, 0)
    draw_outlined_text(context, text, x, y, config.font)

    return canvas.to_buffer(quality=config.jpeg_quality, matte=config.matte_color)
