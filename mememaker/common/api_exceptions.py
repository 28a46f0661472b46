"""Shared HTTP error classification helpers.

Turns httpx status errors from remote image hosts into semantic exception
types, so callers can tell a missing image from a host that is down.
"""

from typing import NoReturn

import httpx


def raise_for_httpx_status_error(
    exc: httpx.HTTPStatusError,
    error_map: dict[str, type[Exception]],
    base_error: type[Exception],
    url_context: str = "",
) -> NoReturn:
    """Classify an httpx HTTPStatusError and raise the appropriate exception.

    Args:
        exc: The httpx HTTPStatusError to classify
        error_map: Mapping of category names to exception types.
            Supported keys: "not_found", "forbidden", "transient"
        base_error: Fallback exception type for unclassified errors
        url_context: Optional URL for richer error messages
    """
    status_code = exc.response.status_code
    target = f" for {url_context}" if url_context else ""

    if status_code in (404, 410) and "not_found" in error_map:
        raise error_map["not_found"](f"Source image not found ({status_code}){target}") from exc

    if status_code in (401, 403) and "forbidden" in error_map:
        raise error_map["forbidden"](f"Source image access denied ({status_code}){target}") from exc

    if status_code in (502, 503, 504) and "transient" in error_map:
        raise error_map["transient"](f"Source host unavailable ({status_code}){target}") from exc

    raise base_error(f"Source image request failed ({status_code}){target}: {exc}") from exc
