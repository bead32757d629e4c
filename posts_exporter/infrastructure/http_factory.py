"""
HTTP client utilities for fetching posts from the source endpoint.

Provides a configured `httpx.Client` builder and a retry-wrapped fetch that
retries transport errors and transient statuses (404, 408, 5xx) with
exponential backoff using tenacity. The delay before retry n is
`retry_backoff_base ** n` seconds (2, 4, 8 by default).
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from posts_exporter import __version__
from posts_exporter.config import Settings, get_settings
from posts_exporter.domain.models import Post
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)

RETRY_STATUS_CODES = frozenset({404, 408})
_BODY_PREVIEW_CHARS = 200

_POSTS_ADAPTER: TypeAdapter[List[Post]] = TypeAdapter(List[Post])


class PostsPayloadError(ValueError):
    """Raised when the response body cannot be parsed into a list of posts."""


def is_transient_response(response: httpx.Response) -> bool:
    """Whether a response status should trigger a retry."""
    return response.status_code in RETRY_STATUS_CODES or response.status_code >= 500


def build_client(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create an `httpx.Client` with the configured timeout and JSON headers.

    Parameters
    ----------
    settings : Settings | None
        Settings to read the timeout from. Defaults to `get_settings()`.
    transport : httpx.BaseTransport | None
        Optional transport override (e.g. `httpx.MockTransport` in tests).
    """
    settings = settings or get_settings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={
            "Accept": "application/json",
            "User-Agent": f"posts-exporter/{__version__}",
        },
        transport=transport,
    )


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is not None and outcome.failed:
        reason = repr(outcome.exception())
    elif outcome is not None:
        reason = f"HTTP {outcome.result().status_code}"
    else:
        reason = "unknown"
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    log.warning(
        f"Fetch attempt {retry_state.attempt_number} failed ({reason}); retrying in {wait:.1f}s",
        extra={"attempt": retry_state.attempt_number, "wait_seconds": wait},
    )


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    # Re-raises the last exception, or hands back the last transient response.
    return retry_state.outcome.result()


def build_retrying(
    settings: Optional[Settings] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Retrying:
    """
    Build the retry policy for the source GET.

    Up to `settings.retry_attempts` retries after the first attempt. When
    retries run out the last outcome is returned (or re-raised) unchanged so
    the caller can apply `raise_for_status()`.
    """
    settings = settings or get_settings()
    base = settings.retry_backoff_base
    return Retrying(
        stop=stop_after_attempt(settings.retry_attempts + 1),
        wait=wait_exponential(multiplier=base, exp_base=base),
        retry=retry_if_exception_type(httpx.TransportError) | retry_if_result(is_transient_response),
        before_sleep=_log_retry,
        retry_error_callback=_last_outcome,
        sleep=sleep,
    )


def parse_posts(response: httpx.Response) -> List[Post]:
    """
    Deserialize a response body into posts.

    Raises
    ------
    PostsPayloadError
        If the body is not JSON or not an array of post objects.
    """
    text = response.text
    log.debug(
        f"Source body preview: {text[:_BODY_PREVIEW_CHARS]}",
        extra={"body_length": len(text)},
    )
    try:
        payload = response.json()
    except ValueError as exc:
        log.error(f"Error deserializing JSON: {exc}")
        raise PostsPayloadError(f"Response body is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        log.error("Error deserializing JSON: top-level value is not an array")
        raise PostsPayloadError(
            f"Expected a JSON array of posts, got {type(payload).__name__}"
        )

    try:
        return _POSTS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        log.error(f"Error deserializing JSON: {exc.error_count()} validation error(s)")
        raise PostsPayloadError(f"Response body does not match the post schema: {exc}") from exc


def fetch_posts(
    client: httpx.Client,
    settings: Optional[Settings] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[Post]:
    """
    GET the configured source URL and return the parsed posts.

    Parameters
    ----------
    client : httpx.Client
        Client used for the request; its lifecycle belongs to the caller.
    settings : Settings | None
        Settings for the URL and retry policy. Defaults to `get_settings()`.
    sleep : Callable[[float], None]
        Sleep function used between retries.

    Raises
    ------
    httpx.TransportError
        If the last attempt failed at the transport level.
    httpx.HTTPStatusError
        If the final response has a non-success status.
    PostsPayloadError
        If the body cannot be parsed.
    """
    settings = settings or get_settings()
    log.info(f"Fetching posts from {settings.source_url}", extra={"url": settings.source_url})

    retrying = build_retrying(settings, sleep=sleep)
    response = retrying(client.get, settings.source_url)
    response.raise_for_status()

    posts = parse_posts(response)
    log.info(f"Fetched {len(posts)} posts", extra={"records": len(posts)})
    return posts


__all__ = [
    "PostsPayloadError",
    "RETRY_STATUS_CODES",
    "build_client",
    "build_retrying",
    "fetch_posts",
    "is_transient_response",
    "parse_posts",
]
