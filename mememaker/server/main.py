"""FastAPI application for the Meme Maker web service.

Endpoints:

- ``GET /``: liveness text
- ``GET /text/{text}``: outlined text on a blank canvas
- ``GET /meme/{text}/{url}``: caption composited over a remote image, where
  ``{url}`` is every remaining path segment (``/meme/LOL/https://host/a.jpg``)

The caption is always the first segment of the undecoded path, so an encoded
slash (``/text/24%2F7``) stays part of the caption.

Architecture:
    Settings and the RenderService are created in the lifespan handler and
    stored on ``app.state``. Routes only translate between HTTP and
    RenderRequest; fetching and rendering live in the service.
"""

import re
from urllib.parse import quote, unquote
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse

from mememaker.common.config import Settings
from mememaker.common.logging import configure_log_path, generate_id, get_logger, set_request_id
from mememaker.common.models import RenderRequest
from mememaker.common.observability import init_logfire
from mememaker.renderer.errors import EncodeError, ImageDecodeError, ImageFetchError
from mememaker.server.render_service import RenderService
from mememaker.server.source_client import SourceImageClient, SourceNotFoundError

logger = get_logger(__name__)

JPEG_MEDIA_TYPE = "image/jpeg"
WELCOME_TEXT = "You have reached the Meme Maker"

_COLLAPSED_SCHEME = re.compile(r"^(https?):/+(?=[^/])", re.IGNORECASE)


def assemble_source_url(path: str, query: str = "") -> str | None:
    """Rebuild the source image URL captured by the meme route.

    Path normalisation can collapse the ``//`` after the scheme, so
    ``https:/host/a.jpg`` is restored to ``https://host/a.jpg``. The request's
    query string belongs to the source URL and is appended.

    Examples:
        >>> assemble_source_url("https:/i.imgur.com/cat.jpg")
        'https://i.imgur.com/cat.jpg'

        >>> assemble_source_url("http://host/a.png", "size=large")
        'http://host/a.png?size=large'

        >>> assemble_source_url("") is None
        True
    """
    if not path:
        return None
    url = _COLLAPSED_SCHEME.sub(r"\1://", path, count=1)
    if query:
        url = f"{url}?{query}"
    return url


def split_raw_path(request: Request, prefix: str) -> tuple[str, str]:
    """Split the undecoded path after ``prefix`` into caption and remainder.

    Routing sees the decoded path, where an encoded ``%2F`` inside a caption
    looks like a separator. The raw path keeps them apart: the caption is the
    first raw segment and everything after it is the remainder. Both are
    percent-decoded before being returned.

    Examples:
        ``/meme/24%2F7/https://host/a.jpg`` -> ``("24/7", "https://host/a.jpg")``
    """
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else quote(request.url.path)
    path = path.split("?", 1)[0]

    root_path = request.scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        path = path[len(root_path) :]

    caption, _, remainder = path[len(prefix) :].partition("/")
    return unquote(caption), unquote(remainder)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application.

    Initializes settings and the render service on startup.
    """
    settings = Settings()
    configure_log_path(settings.log_path)
    init_logfire(settings, app)

    app.state.settings = settings
    app.state.render_service = RenderService(
        renderer_config=settings.renderer,
        source_client=SourceImageClient(settings.fetch),
    )
    logger.info("Meme Maker started", {"host": settings.host, "port": settings.port})

    yield


app = FastAPI(title="Meme Maker", lifespan=lifespan)


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    request_id = generate_id()
    set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        set_request_id(None)
    response.headers["X-Request-ID"] = request_id
    return response


def get_render_service(request: Request) -> RenderService:
    return request.app.state.render_service


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return WELCOME_TEXT


@app.get("/text/{text:path}")
async def text_image(
    request: Request, service: RenderService = Depends(get_render_service)
) -> Response:
    text, remainder = split_raw_path(request, "/text/")
    if not text or remainder:
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        image = await service.text_image(text)
    except EncodeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return Response(content=image, media_type=JPEG_MEDIA_TYPE)


@app.get("/meme/{path:path}")
async def meme(
    request: Request, service: RenderService = Depends(get_render_service)
) -> Response:
    """Caption the image at the URL following the caption segment.

    ``/meme/{text}`` and ``/meme/{text}/`` carry no source and render nothing.

    Returns:
        JPEG response, or 204 when no source URL was given

    Raises:
        HTTPException: 404 if the caption segment is empty or the source image
            does not exist
        HTTPException: 502 if the source image could not be fetched
        HTTPException: 422 if the source is not a decodable image
        HTTPException: 500 if the result could not be encoded
    """
    text, url = split_raw_path(request, "/meme/")
    if not text:
        raise HTTPException(status_code=404, detail="Not Found")

    render_request = RenderRequest(
        text=text,
        url=assemble_source_url(url, request.url.query),
    )

    try:
        image = await service.meme(render_request)
    except SourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ImageFetchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except ImageDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except EncodeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    if image is None:
        return Response(status_code=204)
    return Response(content=image, media_type=JPEG_MEDIA_TYPE)
