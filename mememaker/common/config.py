import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8081


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


class LogfireConfig(BaseModel):
    token: str | None = None
    service_name: str = "mememaker"
    environment: str = "development"

    @property
    def is_enabled(self) -> bool:
        return bool(self.token)


class FontSpec(BaseModel):
    """Font descriptor applied to every piece of rendered text.

    Pillow has no weight axis, so ``weight`` only describes the face; Impact
    itself is a bold display face.
    """

    model_config = ConfigDict(frozen=True)

    family: str = "Impact"
    weight: str = "bold"
    size: int = 50
    path: str | None = None  # Explicit font file, overrides the family lookup

    @field_validator("size")
    @classmethod
    def validate_size(cls, v) -> int:
        """Validate font size is positive."""
        if v <= 0:
            raise ValueError("font size must be greater than 0")
        return v

    @property
    def css(self) -> str:
        """Canvas-style font shorthand, e.g. ``bold 50px Impact``."""
        return f"{self.weight} {self.size}px {self.family}"


DEFAULT_FONT = FontSpec()


class RendererConfig(BaseModel):
    font: FontSpec = Field(default_factory=FontSpec)
    jpeg_quality: int = 90
    matte_color: str = "white"  # Opaque colour behind transparent canvas pixels

    @field_validator("jpeg_quality")
    @classmethod
    def validate_jpeg_quality(cls, v) -> int:
        """Validate jpeg_quality is within Pillow's useful range."""
        if not 1 <= v <= 95:
            raise ValueError("jpeg_quality must be between 1 and 95")
        return v


class FetchConfig(BaseModel):
    timeout_seconds: float = 10.0
    max_bytes: int = 20 * 1024 * 1024
    follow_redirects: bool = True
    user_agent: str = "mememaker/0.1"

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout_seconds(cls, v) -> float:
        """Validate timeout_seconds is positive."""
        if v <= 0:
            raise ValueError("timeout_seconds must be greater than 0")
        return v

    @field_validator("max_bytes")
    @classmethod
    def validate_max_bytes(cls, v) -> int:
        """Validate max_bytes is positive."""
        if v <= 0:
            raise ValueError("max_bytes must be greater than 0")
        return v


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_path: str = "data/logs/mememaker.jsonl"
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    logfire: LogfireConfig = Field(default_factory=LogfireConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("port", mode="before")
    @classmethod
    def validate_port(cls, v) -> int:
        """Validate and return port, using default if invalid."""
        if v is None or v == "":
            return DEFAULT_PORT

        try:
            port = int(v)
        except (ValueError, TypeError):
            logger.warning(f"Invalid port value: {v!r}. Using default: {DEFAULT_PORT}")
            return DEFAULT_PORT

        if not 0 < port < 65536:
            logger.warning(f"Port out of range: {port}. Using default: {DEFAULT_PORT}")
            return DEFAULT_PORT
        return port
