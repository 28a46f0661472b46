"""Text-to-image renderer.

Renders a single line of outlined text onto a blank canvas whose width grows
with the text. There is no upper bound on the width: text too wide for a JPEG
fails to encode instead of being cut short.

Dependencies:
    - PIL/Pillow (through mememaker.renderer.canvas)
"""

import math

from mememaker.common.config import RendererConfig
from mememaker.renderer.canvas import Canvas
from mememaker.renderer.outline import draw_outlined_text

PLACEHOLDER_SIZE = (200, 200)
HORIZONTAL_PADDING = 100
TEXT_INSET = 50


def render_text_image(text: str | None, config: RendererConfig | None = None) -> bytes:
    """Render text as a JPEG sized to fit it.

    Args:
        text: Text to render (a single line)
        config: RendererConfig with font and encoding settings

    Returns:
        JPEG image bytes, ``measured width + 100`` pixels wide and 200 pixels tall

    Raises:
        EncodeError: If the canvas cannot be encoded (e.g. text too wide for JPEG)

    Examples:
        >>> jpeg = render_text_image("HI")
        >>> jpeg[:2] == b"\\xff\\xd8"
        True

        >>> blank = render_text_image("")
        >>> isinstance(blank, bytes)
        True
    """
    if config is None:
        config = RendererConfig()
    if not text:
        text = ""

    canvas = Canvas(*PLACEHOLDER_SIZE)
    context = canvas.get_context()

    context.font = config.font
    text_width = context.measure_text(text).width

    canvas.width = math.ceil(text_width) + HORIZONTAL_PADDING
    # resizing dropped the font
    context.font = config.font

    draw_outlined_text(context, text, TEXT_INSET, TEXT_INSET, config.font)

    return canvas.to_buffer(quality=config.jpeg_quality, matte=config.matte_color)
