"""HTTP helpers for release catalogs and the dotnet install script.

Transport failures never raise from here: callers get a status code of 0
plus a description of the last error and decide whether that is fatal.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _trace(message: str, **fields: Any) -> None:
    """Emit a structured DEBUG record for an HTTP event."""
    if is_debug_enabled(logger):
        logger.debug(message, extra=extra_context(component="http_client", **fields))


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """GET with a per-request timeout and up to ``HTTP_RETRY_MAX`` attempts.

    Only timeouts and connection-level errors are retried; any HTTP response,
    including 4xx/5xx, is returned as is.

    Returns:
        Tuple of (status_code, headers_dict, body_text).
    """
    target = safe_url(url)
    merged = {"User-Agent": Constants.USER_AGENT, **(headers or {})}
    last_error = ""

    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        _trace("HTTP request", event="http_request", target=target, attempt=attempt)
        with Timer() as timer:
            try:
                response = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, headers=merged, **kwargs)
            except requests.Timeout:
                last_error = "timeout"
                outcome = "timeout"
            except requests.RequestException as exc:
                last_error = str(exc)
                outcome = "request_exception"
            else:
                _trace(
                    "HTTP response",
                    event="http_response",
                    target=target,
                    status_code=response.status_code,
                    duration_ms=timer.duration_ms(),
                )
                return response.status_code, dict(response.headers), response.text
        _trace("HTTP attempt failed", event="http_exception", target=target,
               attempt=attempt, outcome=outcome)

    logger.debug("Giving up on %s after %d attempts", target, Constants.HTTP_RETRY_MAX)
    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {last_error}"


def get_json(url: str, **kwargs: Any) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET a JSON document.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none). The data is
        None for non-200 responses and undecodable bodies.
    """
    headers = {"Accept": "application/json", **(kwargs.pop("headers", None) or {})}
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)
    if status_code != 200 or not text:
        return status_code, response_headers, None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        _trace("JSON decode error", event="parse", target=safe_url(url), outcome="json_decode_error")
        return status_code, response_headers, None
    return status_code, response_headers, data


def download_file(url: str, destination: str) -> Tuple[bool, Optional[str]]:
    """Download a text file (such as an install script) to ``destination``.

    Returns:
        Tuple of (ok, error_message_or_none).
    """
    status_code, _, text = robust_get(url)
    if status_code == 0:
        return False, text
    if status_code != 200:
        return False, f"HTTP {status_code} from {safe_url(url)}"
    try:
        with open(destination, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
    except OSError as exc:
        return False, f"Could not write {destination}: {exc}"
    return True, None
