"""Exception classes for image rendering."""


class RenderError(Exception):
    """Base exception for rendering errors."""

    pass


class ImageDecodeError(RenderError):
    """Raised when source image bytes cannot be decoded into a raster image."""


class ImageFetchError(ImageDecodeError):
    """Raised when the source image cannot be retrieved.

    An unreachable source is reported to callers the same way as undecodable
    bytes: the meme cannot be rendered and no partial image is produced.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class EncodeError(RenderError):
    """Raised when the finished canvas cannot be encoded."""


class DrawStateError(RenderError):
    """Raised when text is measured or drawn before a font has been applied."""
