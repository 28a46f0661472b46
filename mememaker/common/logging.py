"""Structured JSON logging module for mememaker."""

import json
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filelock import FileLock

DEFAULT_LOG_PATH = Path("data/logs/mememaker.jsonl")

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def generate_id() -> str:
    """Generate a request ID, falling back to a timestamp without an entropy source.

    Example:
        >>> request_id = generate_id()
        >>> isinstance(request_id, str) and len(request_id) > 0
        True
    """
    try:
        return str(uuid.uuid4())
    except OSError:
        return datetime.now(tz=UTC).isoformat()


def set_request_id(request_id: str | None) -> None:
    """Set the request ID for the current context.

    Example:
        >>> set_request_id("req-456")
        >>> get_request_id()
        'req-456'
    """
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Get the current request ID from context, or None outside a request."""
    return _request_id.get()


class JSONLogger:
    """Logger that writes JSON Lines to a file with consistent metadata."""

    def __init__(self, name: str, log_path: str | Path = DEFAULT_LOG_PATH):
        self.name = name
        self.log_path = log_path

    @property
    def log_path(self) -> Path:
        """Get the log file path."""
        return self._log_path

    @log_path.setter
    def log_path(self, value: str | Path) -> None:
        """Set the log file path, creating its directory."""
        self._log_path = Path(value)
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock_path = self._log_path.with_suffix(self._log_path.suffix + ".lock")

    def _serialize_value(self, value: Any) -> Any:
        """Convert non-serializable values to string representation."""
        if isinstance(value, (str, int, float, bool, type(None))):
            return value
        if isinstance(value, (list, tuple)):
            return [self._serialize_value(v) for v in value]
        if isinstance(value, dict):
            return {str(k): self._serialize_value(v) for k, v in value.items()}
        return str(value)

    def _log(self, level: str, message: str, metadata: dict[str, Any] | None = None) -> None:
        """Write a log entry as a JSON line.

        Args:
            level: Log level (e.g., "info", "error", "warning", "debug")
            message: Log message
            metadata: Optional metadata dict to include in log entry
        """
        entry = {
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "level": level,
            "logger": self.name,
            "message": message,
        }

        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id

        if metadata:
            entry["metadata"] = self._serialize_value(metadata)

        json_line = json.dumps(entry, ensure_ascii=False)

        with FileLock(self._lock_path):
            with self._log_path.open("a", encoding="utf-8") as f:
                f.write(json_line + "\n")

    def info(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("info", message, metadata)

    def error(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("error", message, metadata)

    def warning(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("warning", message, metadata)

    def debug(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("debug", message, metadata)


_loggers: dict[str, JSONLogger] = {}
_log_path: Path = DEFAULT_LOG_PATH


def get_logger(name: str) -> JSONLogger:
    """Get or create a logger with the given name.

    Args:
        name: Logger name (typically module name, e.g., "mememaker.server.render_service")

    Returns:
        JSONLogger instance
    """
    if name not in _loggers:
        _loggers[name] = JSONLogger(name, _log_path)
    return _loggers[name]


def configure_log_path(path: str | Path) -> None:
    """Point every existing and future logger at a new log file."""
    global _log_path

    _log_path = Path(path)
    for logger in _loggers.values():
        logger.log_path = _log_path
