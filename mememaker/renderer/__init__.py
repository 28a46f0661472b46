from mememaker.renderer.canvas import Canvas, DrawContext, DrawState, TextMetrics, load_font
from mememaker.renderer.errors import (
    DrawStateError,
    EncodeError,
    ImageDecodeError,
    ImageFetchError,
    RenderError,
)
from mememaker.renderer.meme import caption_anchor, decode_image, render_meme
from mememaker.renderer.outline import draw_outlined_text
from mememaker.renderer.text_image import render_text_image

__all__ = [
    "Canvas",
    "DrawContext",
    "DrawState",
    "DrawStateError",
    "EncodeError",
    "ImageDecodeError",
    "ImageFetchError",
    "RenderError",
    "TextMetrics",
    "caption_anchor",
    "decode_image",
    "draw_outlined_text",
    "load_font",
    "render_meme",
    "render_text_image",
]
