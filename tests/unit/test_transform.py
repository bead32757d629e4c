from __future__ import annotations

import uuid

from posts_exporter.domain.models import Post
from posts_exporter.transform import assign_hash_ids

POST_COUNT = 50


def _posts(count: int) -> list[Post]:
    return [Post(user_id=1, id=i, title=f"t{i}", body="b") for i in range(count)]


def test_assign_hash_ids_sets_unique_uuid_strings():
    posts = _posts(POST_COUNT)

    result = assign_hash_ids(posts)

    assert result is posts
    hash_ids = [post.hash_id for post in posts]
    assert len(set(hash_ids)) == POST_COUNT
    for hash_id in hash_ids:
        assert isinstance(hash_id, str)
        assert str(uuid.UUID(hash_id)) == hash_id


def test_assign_hash_ids_keeps_source_fields_and_order():
    posts = _posts(3)
    assign_hash_ids(posts)
    assert [post.id for post in posts] == [0, 1, 2]
    assert [post.title for post in posts] == ["t0", "t1", "t2"]


def test_assign_hash_ids_replaces_previous_values():
    posts = _posts(1)
    posts[0].hash_id = "stale"
    assign_hash_ids(posts)
    assert posts[0].hash_id != "stale"


def test_assign_hash_ids_empty_list():
    assert assign_hash_ids([]) == []
