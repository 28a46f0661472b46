from mememaker.common.config import DEFAULT_FONT, FontSpec
from mememaker.renderer.canvas import DrawContext

FILL_COLOR = "white"
OUTLINE_COLOR = "black"


def draw_outlined_text(
    context: DrawContext,
    text: str,
    x: float,
    y: float,
    font: FontSpec = DEFAULT_FONT,
) -> None:
    """Paint text filled in white, then outlined in black, at the same anchor.

    The canvas must already have its final size: resizing afterwards would
    wipe what is drawn here.

    Args:
        context: Drawing context of a sized canvas
        text: Text to paint
        x: Left edge of the text
        y: Baseline of the text
        font: Font to apply before painting
    """
    context.font = font
    context.fill_style = FILL_COLOR
    context.fill_text(text, x, y)
    context.stroke_style = OUTLINE_COLOR
    context.stroke_text(text, x, y)
