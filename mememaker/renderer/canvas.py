"""In-memory drawing surface with a 2D text context.

This module provides a small canvas abstraction over Pillow images that keeps
the semantics the renderers rely on:

- Resizing a canvas (changing ``width`` or ``height``) clears its pixels and
  resets every drawing setting, including the font. Callers re-apply the
  font after each resize.
- Text is anchored at its baseline-left point, like a canvas ``fillText``.
- Strokes are painted as an outline ring around the glyphs and never cover
  the fill.

Dependencies:
    - PIL/Pillow: Raster storage, font rasterisation and JPEG encoding
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFont

from mememaker.common.config import FontSpec
from mememaker.renderer.errors import DrawStateError, EncodeError

TEXT_ANCHOR = "ls"  # left, baseline

PillowFont = ImageFont.FreeTypeFont | ImageFont.ImageFont


@lru_cache(maxsize=8)
def load_font(spec: FontSpec) -> PillowFont:
    """Resolve a FontSpec to a Pillow font object.

    The explicit ``path`` wins; otherwise the family name is looked up through
    Pillow's font search. When the face is not installed, Pillow's bundled
    scalable face is used at the same pixel size.

    Args:
        spec: Font descriptor

    Returns:
        Pillow font at ``spec.size`` pixels
    """
    try:
        return ImageFont.truetype(spec.path or spec.family, spec.size)
    except OSError:
        return ImageFont.load_default(size=spec.size)


@dataclass
class TextMetrics:
    width: float


@dataclass
class DrawState:
    """Drawing settings owned by a canvas; replaced wholesale on resize."""

    font: FontSpec | None = None
    fill_style: str = "black"
    stroke_style: str = "black"
    line_width: int = 1


class DrawContext:
    """2D drawing context bound to a single canvas."""

    def __init__(self, canvas: "Canvas") -> None:
        self._canvas = canvas

    @property
    def canvas(self) -> "Canvas":
        return self._canvas

    @property
    def state(self) -> DrawState:
        return self._canvas._state

    @property
    def font(self) -> FontSpec | None:
        return self.state.font

    @font.setter
    def font(self, spec: FontSpec) -> None:
        self.state.font = spec

    @property
    def fill_style(self) -> str:
        return self.state.fill_style

    @fill_style.setter
    def fill_style(self, color: str) -> None:
        self.state.fill_style = color

    @property
    def stroke_style(self) -> str:
        return self.state.stroke_style

    @stroke_style.setter
    def stroke_style(self, color: str) -> None:
        self.state.stroke_style = color

    @property
    def line_width(self) -> int:
        return self.state.line_width

    @line_width.setter
    def line_width(self, width: int) -> None:
        if width <= 0:
            raise ValueError("line width must be greater than 0")
        self.state.line_width = width

    def _require_font(self) -> PillowFont:
        if self.state.font is None:
            raise DrawStateError("No font applied to the drawing context (was the canvas resized?)")
        return load_font(self.state.font)

    def measure_text(self, text: str) -> TextMetrics:
        """Measure the advance width of text under the current font.

        Raises:
            DrawStateError: If no font has been applied since the last resize
        """
        font = self._require_font()
        return TextMetrics(width=float(font.getlength(text)))

    def fill_text(self, text: str, x: float, y: float) -> None:
        """Fill text with the current fill style, baseline-left at (x, y)."""
        font = self._require_font()
        if not text:
            return
        draw = ImageDraw.Draw(self._canvas.image)
        draw.text((x, y), text, font=font, fill=self.fill_style, anchor=TEXT_ANCHOR)

    def stroke_text(self, text: str, x: float, y: float) -> None:
        """Outline text with the current stroke style, baseline-left at (x, y)."""
        font = self._require_font()
        if not text:
            return
        size = self._canvas.size

        stroked = Image.new("L", size, 0)
        ImageDraw.Draw(stroked).text(
            (x, y),
            text,
            font=font,
            fill=255,
            anchor=TEXT_ANCHOR,
            stroke_width=self.line_width,
            stroke_fill=255,
        )
        glyphs = Image.new("L", size, 0)
        ImageDraw.Draw(glyphs).text((x, y), text, font=font, fill=255, anchor=TEXT_ANCHOR)
        ring = ImageChops.subtract(stroked, glyphs)

        color = ImageColor.getcolor(self.stroke_style, "RGBA")
        self._canvas.image.paste(Image.new("RGBA", size, color), (0, 0), ring)

    def draw_image(self, image: Image.Image, x: int = 0, y: int = 0) -> None:
        """Composite an image onto the canvas at its natural size."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        self._canvas.image.alpha_composite(image, dest=(x, y))


class Canvas:
    """Transparent RGBA drawing surface with mutable dimensions.

    Examples:
        >>> canvas = Canvas(200, 200)
        >>> context = canvas.get_context()
        >>> context.font = FontSpec()
        >>> canvas.width = 300
        >>> context.font is None
        True
    """

    def __init__(self, width: int = 200, height: int = 200) -> None:
        self._state = DrawState()
        self._image = self._blank(width, height)
        self._context = DrawContext(self)

    @staticmethod
    def _blank(width: int, height: int) -> Image.Image:
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        return Image.new("RGBA", (width, height), (0, 0, 0, 0))

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def width(self) -> int:
        return self._image.width

    @width.setter
    def width(self, value: float) -> None:
        self.resize(value, self.height)

    @property
    def height(self) -> int:
        return self._image.height

    @height.setter
    def height(self, value: float) -> None:
        self.resize(self.width, value)

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    def resize(self, width: float, height: float) -> None:
        """Set both dimensions, clearing pixels and resetting the draw state.

        Fractional sizes are truncated.
        """
        self._image = self._blank(math.trunc(width), math.trunc(height))
        self._state = DrawState()

    def get_context(self) -> DrawContext:
        return self._context

    def to_buffer(self, quality: int = 90, matte: str = "white") -> bytes:
        """Encode the canvas as JPEG bytes.

        Transparent pixels are flattened onto the opaque ``matte`` colour.

        Args:
            quality: JPEG quality (1-95)
            matte: Colour behind transparent pixels

        Returns:
            JPEG image bytes

        Raises:
            EncodeError: If Pillow cannot encode the canvas
        """
        try:
            flattened = Image.new("RGB", self.size, matte)
            flattened.paste(self._image, (0, 0), self._image)
            output = BytesIO()
            flattened.save(output, format="JPEG", quality=quality)
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to encode {self.width}x{self.height} canvas: {e}") from e
        return output.getvalue()
