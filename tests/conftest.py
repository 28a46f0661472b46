"""Shared fixtures for mememaker tests."""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from mememaker.common import logging as json_logging


@pytest.fixture(autouse=True)
def isolated_log_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Send every JSON log line to a per-test file instead of data/logs."""
    log_path = tmp_path / "logs" / "mememaker.jsonl"
    monkeypatch.setattr(json_logging, "_log_path", log_path)
    for logger in json_logging._loggers.values():
        monkeypatch.setattr(logger, "log_path", log_path)
    return log_path


def make_image_bytes(
    width: int = 100,
    height: int = 100,
    color: tuple[int, ...] = (200, 30, 30),
    fmt: str = "PNG",
    mode: str = "RGB",
) -> bytes:
    """Encode a solid-colour image in memory."""
    img = Image.new(mode, (width, height), color=color)
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def image_bytes():
    """Factory for encoded test images."""
    return make_image_bytes


@pytest.fixture
def png_100() -> bytes:
    """A 100x100 red PNG."""
    return make_image_bytes()


@pytest.fixture
def jpeg_320x240() -> bytes:
    """A 320x240 blue JPEG."""
    return make_image_bytes(320, 240, color=(30, 60, 200), fmt="JPEG")
