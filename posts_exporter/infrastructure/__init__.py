"""
Infrastructure package for the posts exporter.

Centralizes I/O concerns: the retrying HTTP fetch of the source endpoint and
database connectivity. Keep this layer focused on I/O and resource
management, decoupled from exporter/orchestrator logic.
"""

from posts_exporter.infrastructure.db_factory import get_sync_connection, resolve_conninfo
from posts_exporter.infrastructure.http_factory import (
    PostsPayloadError,
    build_client,
    fetch_posts,
)

__all__ = [
    "PostsPayloadError",
    "build_client",
    "fetch_posts",
    "get_sync_connection",
    "resolve_conninfo",
]
