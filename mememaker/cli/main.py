"""Command line entry point for Meme Maker.

Renders text images and memes to files, or serves the web API.

Dependencies:
    - typer: Command parsing
    - mememaker.common.display: Console output and formatting
"""

import asyncio
import sys
from io import BytesIO
from pathlib import Path
from typing import Annotated

import typer
import uvicorn
from PIL import Image
from rich.markup import escape

from mememaker.common.config import ConfigError, RendererConfig, Settings
from mememaker.common.display import create_render_table, get_console
from mememaker.common.yaml_config import load_renderer_config
from mememaker.renderer.errors import RenderError
from mememaker.renderer.meme import render_meme
from mememaker.renderer.text_image import render_text_image
from mememaker.server.source_client import SourceImageClient

app = typer.Typer(help="Render outlined text images and captioned memes.")

DEFAULT_CONFIG_PATH = Path("config.yaml")

ConfigOption = Annotated[
    Path, typer.Option("--config", help="YAML file with a 'renderer' section")
]


def _load_config(config_path: Path) -> RendererConfig:
    console = get_console()
    try:
        return load_renderer_config(str(config_path))
    except (ConfigError, ValueError) as e:
        console.print(f"[error]Error loading renderer config: {escape(str(e))}[/error]")
        sys.exit(1)


def _write_image(image: bytes, output: Path) -> None:
    console = get_console()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image)

    with Image.open(BytesIO(image)) as img:
        width, height = img.size

    console.print("[success]Image rendered[/success]")
    console.print(create_render_table(output, width, height, len(image)))


def _read_source(source: str, settings: Settings) -> bytes:
    """Read a local file, or download the source when it is an http(s) URL."""
    if source.lower().startswith(("http://", "https://")):
        client = SourceImageClient(settings.fetch)
        return asyncio.run(client.fetch(source))

    path = Path(source)
    if not path.is_file():
        raise typer.BadParameter(f"Source image not found: {source}", param_hint="SOURCE")
    return path.read_bytes()


@app.command()
def text(
    text: Annotated[str, typer.Argument(help="Text to render")],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the JPEG")
    ] = Path("text.jpg"),
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Render TEXT as outlined text on a blank canvas."""
    console = get_console()
    config = _load_config(config_path)

    try:
        image = render_text_image(text, config)
    except RenderError as e:
        console.print(f"[error]Render failed: {escape(str(e))}[/error]")
        sys.exit(1)

    _write_image(image, output)


@app.command()
def meme(
    text: Annotated[str, typer.Argument(help="Caption text")],
    source: Annotated[str, typer.Argument(help="Image file path or http(s) URL")],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the JPEG")
    ] = Path("meme.jpg"),
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Caption the image at SOURCE with TEXT."""
    console = get_console()
    config = _load_config(config_path)

    try:
        source_image = _read_source(source, Settings())
        image = render_meme(text, source_image, config)
    except RenderError as e:
        console.print(f"[error]Render failed: {escape(str(e))}[/error]")
        sys.exit(1)

    _write_image(image, output)


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Interface to bind")] = None,
    port: Annotated[
        int | None, typer.Option("--port", help="Port to listen on (default: $PORT or 8081)")
    ] = None,
) -> None:
    """Serve the Meme Maker web API."""
    console = get_console()
    settings = Settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    console.print(f"[info]Meme Maker listening on port {bind_port}[/info]")
    uvicorn.run("mememaker.server.main:app", host=bind_host, port=bind_port)


if __name__ == "__main__":
    app()
