"""
Posts Exporter - fetch posts over HTTP and export them to JSON, CSV or SQL.

The pipeline is a single linear pass:

- Fetch the post list from the source endpoint, retrying transient failures
  with exponential backoff
- Stamp every post with a freshly generated hash id
- Hand the batch to exactly one exporter selected by configuration

All failures are caught at one top-level boundary in the orchestrator.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from posts_exporter.config import Settings, get_settings
from posts_exporter.domain.models import Post
from posts_exporter.exporters.abstract import AbstractExporter, ExportResult, Exporter
from posts_exporter.orchestrator import available_exporters, resolve_exporter, run_pipeline
from posts_exporter.transform import assign_hash_ids
from posts_exporter.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Post",
    # Pipeline
    "assign_hash_ids",
    "available_exporters",
    "resolve_exporter",
    "run_pipeline",
    # Exporter abstractions
    "AbstractExporter",
    "ExportResult",
    "Exporter",
    # Logging
    "configure_logging",
    "get_logger",
]
