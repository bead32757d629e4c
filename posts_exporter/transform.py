"""
Record transformation: stamp every fetched post with a generated identifier.
"""

from __future__ import annotations

import uuid
from typing import List

from posts_exporter.domain.models import Post
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)


def new_hash_id() -> str:
    """Return a fresh random UUID4 in canonical hyphenated form."""
    return str(uuid.uuid4())


def assign_hash_ids(posts: List[Post]) -> List[Post]:
    """
    Set `hash_id` on every post in place and return the same list.
    """
    for post in posts:
        post.hash_id = new_hash_id()
    log.info(f"Assigned hash ids to {len(posts)} posts", extra={"records": len(posts)})
    return posts


__all__ = ["assign_hash_ids", "new_hash_id"]
