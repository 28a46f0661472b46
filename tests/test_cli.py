"""Tests for the mememaker command line."""

from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image
from typer.testing import CliRunner

from mememaker.cli.main import app
from mememaker.renderer.errors import ImageFetchError

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_port_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)


class TestTextCommand:
    """Tests for `mememaker text`."""

    def test_writes_jpeg(self, tmp_path: Path):
        """The text command writes a JPEG to --output."""
        output = tmp_path / "hi.jpg"

        result = runner.invoke(app, ["text", "HI", "--output", str(output)])

        assert result.exit_code == 0, result.output
        with Image.open(output) as img:
            assert img.format == "JPEG"
            assert img.height == 200

    def test_uses_yaml_config(self, tmp_path: Path):
        """Renderer settings come from --config."""
        config = tmp_path / "config.yaml"
        config.write_text("renderer:\n  font:\n    size: 20\n")
        small = tmp_path / "small.jpg"
        default = tmp_path / "default.jpg"

        runner.invoke(app, ["text", "HELLO", "-o", str(small), "--config", str(config)])
        runner.invoke(
            app, ["text", "HELLO", "-o", str(default), "--config", str(tmp_path / "none.yaml")]
        )

        with Image.open(small) as small_img, Image.open(default) as default_img:
            assert small_img.width < default_img.width

    def test_invalid_config_exits_1(self, tmp_path: Path):
        """A broken config file is reported and exits 1."""
        config = tmp_path / "config.yaml"
        config.write_text("renderer: [broken\n")

        result = runner.invoke(
            app, ["text", "HI", "-o", str(tmp_path / "x.jpg"), "--config", str(config)]
        )

        assert result.exit_code == 1
        assert "Error loading renderer config" in result.output


class TestMemeCommand:
    """Tests for `mememaker meme`."""

    def test_local_file_source(self, tmp_path: Path, jpeg_320x240):
        """A local image is captioned at its own size."""
        source = tmp_path / "source.jpg"
        source.write_bytes(jpeg_320x240)
        output = tmp_path / "meme.jpg"

        result = runner.invoke(app, ["meme", "LOL", str(source), "-o", str(output)])

        assert result.exit_code == 0, result.output
        with Image.open(output) as img:
            assert img.size == (320, 240)

    def test_url_source_is_fetched(self, tmp_path: Path, png_100):
        """http(s) sources are downloaded with the source client."""
        output = tmp_path / "meme.jpg"

        with patch(
            "mememaker.cli.main.SourceImageClient.fetch", new=AsyncMock(return_value=png_100)
        ) as fetch:
            result = runner.invoke(
                app, ["meme", "LOL", "https://images.example.com/cat.png", "-o", str(output)]
            )

        assert result.exit_code == 0, result.output
        fetch.assert_awaited_once_with("https://images.example.com/cat.png")
        assert Image.open(BytesIO(output.read_bytes())).size == (100, 100)

    def test_fetch_failure_exits_1(self, tmp_path: Path):
        """Fetch errors are reported and exit 1."""
        with patch(
            "mememaker.cli.main.SourceImageClient.fetch",
            new=AsyncMock(side_effect=ImageFetchError("connection refused")),
        ):
            result = runner.invoke(
                app,
                ["meme", "LOL", "https://images.example.com/cat.png", "-o", str(tmp_path / "m")],
            )

        assert result.exit_code == 1
        assert "connection refused" in result.output

    def test_undecodable_file_exits_1(self, tmp_path: Path):
        """A file that is not an image exits 1 without writing output."""
        source = tmp_path / "notes.txt"
        source.write_text("not an image")
        output = tmp_path / "meme.jpg"

        result = runner.invoke(app, ["meme", "LOL", str(source), "-o", str(output)])

        assert result.exit_code == 1
        assert "Render failed" in result.output
        assert not output.exists()

    def test_missing_file_is_usage_error(self, tmp_path: Path):
        """A missing local source is a usage error."""
        result = runner.invoke(app, ["meme", "LOL", str(tmp_path / "nope.png")])

        assert result.exit_code == 2


class TestServeCommand:
    """Tests for `mememaker serve`."""

    def test_runs_uvicorn_on_default_port(self):
        """serve binds the configured default port."""
        with patch("mememaker.cli.main.uvicorn.run") as run:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0, result.output
        run.assert_called_once_with("mememaker.server.main:app", host="0.0.0.0", port=8081)
        assert "listening on port 8081" in result.output

    def test_port_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """PORT from the environment is used when --port is absent."""
        monkeypatch.setenv("PORT", "9001")

        with patch("mememaker.cli.main.uvicorn.run") as run:
            runner.invoke(app, ["serve"])

        assert run.call_args.kwargs["port"] == 9001

    def test_port_option_wins(self, monkeypatch: pytest.MonkeyPatch):
        """--port overrides the environment."""
        monkeypatch.setenv("PORT", "9001")

        with patch("mememaker.cli.main.uvicorn.run") as run:
            runner.invoke(app, ["serve", "--port", "7000", "--host", "127.0.0.1"])

        run.assert_called_once_with("mememaker.server.main:app", host="127.0.0.1", port=7000)
