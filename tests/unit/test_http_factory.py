from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import httpx
import pytest

from posts_exporter.config import Settings
from posts_exporter.infrastructure.http_factory import (
    PostsPayloadError,
    build_client,
    fetch_posts,
    is_transient_response,
)

MAX_RETRIES = 3
EXPECTED_WAITS = [2.0, 4.0, 8.0]


class _Handler:
    """MockTransport handler replaying a scripted sequence of responses."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        outcome = self.outcomes[min(self.calls, len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def test_fetch_posts_parses_payload(
    make_client, test_settings: Settings, sample_payload: List[Dict[str, Any]], sleeps
):
    handler = _Handler(_json_response(sample_payload))

    posts = fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)

    assert handler.calls == 1
    assert sleeps == []
    assert [post.id for post in posts] == [1, 2, 3]
    assert posts[0].title == "a"
    assert posts[0].body == "b"
    assert all(post.hash_id is None for post in posts)


def test_fetch_posts_requests_configured_url(make_client, test_settings: Settings, sleeps):
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return _json_response([])

    assert fetch_posts(make_client(handler), test_settings, sleep=sleeps.append) == []
    assert seen == [test_settings.source_url]


def test_404_is_retried_three_times_then_fails(make_client, test_settings: Settings, sleeps):
    handler = _Handler(httpx.Response(404))

    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)

    assert excinfo.value.response.status_code == 404
    assert handler.calls == MAX_RETRIES + 1
    assert sleeps == EXPECTED_WAITS


def test_transient_status_then_success(
    make_client, test_settings: Settings, sample_payload, sleeps
):
    handler = _Handler(httpx.Response(503), httpx.Response(404), _json_response(sample_payload))

    posts = fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)

    assert len(posts) == len(sample_payload)
    assert handler.calls == 3
    assert sleeps == EXPECTED_WAITS[:2]


def test_transport_error_is_retried_then_reraised(make_client, test_settings: Settings, sleeps):
    handler = _Handler(httpx.ConnectError("connection refused"))

    with pytest.raises(httpx.ConnectError, match="connection refused"):
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)

    assert handler.calls == MAX_RETRIES + 1
    assert sleeps == EXPECTED_WAITS


def test_non_transient_status_is_not_retried(make_client, test_settings: Settings, sleeps):
    handler = _Handler(httpx.Response(403))

    with pytest.raises(httpx.HTTPStatusError):
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)

    assert handler.calls == 1
    assert sleeps == []


def test_retry_count_and_backoff_follow_settings(make_client, test_settings: Settings, sleeps):
    settings = test_settings.model_copy(update={"retry_attempts": 1, "retry_backoff_base": 3.0})
    handler = _Handler(httpx.Response(500))

    with pytest.raises(httpx.HTTPStatusError):
        fetch_posts(make_client(handler), settings, sleep=sleeps.append)

    assert handler.calls == 2
    assert sleeps == [3.0]


def test_retries_are_logged(make_client, test_settings: Settings, sleeps, caplog):
    handler = _Handler(httpx.Response(404), _json_response([]))

    with caplog.at_level(logging.WARNING, logger="posts_exporter.infrastructure.http_factory"):
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)

    assert any("HTTP 404" in message for message in caplog.messages)


def test_invalid_json_body_raises_payload_error(make_client, test_settings: Settings, sleeps):
    handler = _Handler(httpx.Response(200, text="<html>not json</html>"))

    with pytest.raises(PostsPayloadError, match="not valid JSON"):
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)


def test_non_array_body_raises_payload_error(make_client, test_settings: Settings, sleeps):
    handler = _Handler(_json_response({"userId": 1, "id": 1, "title": "a", "body": "b"}))

    with pytest.raises(PostsPayloadError, match="JSON array"):
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)


@pytest.mark.parametrize(
    "item",
    [
        {"userId": "not-a-number", "id": 1, "title": "a", "body": "b"},
        {"userId": "1", "id": 1, "title": "a", "body": "b"},
        {"userId": True, "id": 1, "title": "a", "body": "b"},
        {"userId": 1, "id": 1.0, "title": "a", "body": "b"},
        {"userId": 1, "id": 1, "title": 7, "body": "b"},
        {"userId": 1, "id": 1, "title": "a"},
    ],
)
def test_wrong_shape_raises_payload_error(
    item: Dict[str, Any], make_client, test_settings: Settings, sleeps
):
    body = json.dumps([item])
    handler = _Handler(httpx.Response(200, text=body))

    with pytest.raises(PostsPayloadError, match="post schema"):
        fetch_posts(make_client(handler), test_settings, sleep=sleeps.append)


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(200, False), (400, False), (404, True), (408, True), (500, True), (503, True)],
)
def test_is_transient_response(status_code: int, expected: bool):
    assert is_transient_response(httpx.Response(status_code)) is expected


def test_build_client_applies_timeout_and_headers(test_settings: Settings):
    with build_client(test_settings) as client:
        assert client.timeout.read == test_settings.http_timeout_seconds
        assert client.headers["Accept"] == "application/json"
        assert client.headers["User-Agent"].startswith("posts-exporter/")
