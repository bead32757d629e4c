"""
Domain package for the posts exporter.

Exports the record model shared by the fetcher, transformer and exporters.
Keep this package focused on data definitions and validation concerns.
"""

from posts_exporter.domain.models import CSV_COLUMNS, Post

__all__ = [
    "CSV_COLUMNS",
    "Post",
]
