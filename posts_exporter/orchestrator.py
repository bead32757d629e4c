"""
Orchestrator for the fetch → transform → export pipeline.

Usage (example from CLI):
    from posts_exporter.orchestrator import run_pipeline

    result = run_pipeline(export_type="csv")
    print(result)

The export type is resolved first, so an invalid value never triggers a
network call or a write. Everything runs inside one failure boundary: errors
are logged, their message is echoed to stdout, and `None` is returned.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional

import httpx
import typer

from posts_exporter.config import Settings, get_settings
from posts_exporter.domain.models import Post
from posts_exporter.exporters.abstract import Exporter, ExportResult
from posts_exporter.exporters.csv_exporter import CsvExporter
from posts_exporter.exporters.json_exporter import JsonExporter
from posts_exporter.exporters.sql_exporter import SqlExporter
from posts_exporter.infrastructure.http_factory import build_client, fetch_posts
from posts_exporter.transform import assign_hash_ids
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)


def _exporter_factories() -> Dict[str, Callable[[Settings], Exporter]]:
    """Registry of available exporters, keyed by export type."""
    return {
        "json": lambda settings: JsonExporter(output_dir=settings.output_dir),
        "csv": lambda settings: CsvExporter(output_dir=settings.output_dir),
        "sql": lambda settings: SqlExporter(settings=settings),
    }


def available_exporters() -> List[str]:
    """List available export types."""
    return sorted(_exporter_factories().keys())


def resolve_exporter(export_type: Optional[str], settings: Settings) -> Exporter:
    """
    Build the exporter for `export_type`, matched case-insensitively.

    Raises
    ------
    ValueError
        If the export type is missing or unknown.
    """
    factories = _exporter_factories()
    key = (export_type or "").strip().lower()
    if key not in factories:
        raise ValueError(
            f"Invalid export type specified: '{export_type}'. "
            f"Available: {', '.join(sorted(factories))}"
        )
    return factories[key](settings)


def _fetch(
    client: Optional[httpx.Client],
    settings: Settings,
    sleep: Callable[[float], None],
) -> List[Post]:
    if client is not None:
        return fetch_posts(client, settings, sleep=sleep)
    with build_client(settings) as owned_client:
        return fetch_posts(owned_client, settings, sleep=sleep)


def run_pipeline(
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
    export_type: Optional[str] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[ExportResult]:
    """
    Fetch posts, assign hash ids, and export them with the configured exporter.

    Parameters
    ----------
    settings : Settings | None
        Effective configuration. Defaults to `get_settings()`.
    client : httpx.Client | None
        HTTP client to fetch with. If None, one is built and closed here.
    export_type : str | None
        Overrides `settings.export_type` when given.
    sleep : Callable[[float], None]
        Sleep function used between fetch retries.

    Returns
    -------
    ExportResult | None
        The exporter's summary, or None if any stage failed.
    """
    requested = export_type
    try:
        settings = settings or get_settings()
        if requested is None:
            requested = settings.export_type
        exporter = resolve_exporter(requested, settings)
        log.info(f"[PIPELINE START] export_type={exporter.name}", extra={"exporter": exporter.name})

        posts = _fetch(client, settings, sleep)
        assign_hash_ids(posts)
        result = exporter.export(posts)

        log.info(
            f"[PIPELINE COMPLETE] {result.get('records', 0)} posts exported via {exporter.name}",
            extra={
                "exporter": exporter.name,
                "records": result.get("records"),
                "destination": result.get("destination"),
            },
        )
        return result
    except Exception as exc:  # noqa: BLE001 - single top-level failure boundary
        log.exception("[PIPELINE FAILED]", extra={"export_type": requested})
        typer.echo(f"An error occurred: {exc}")
        return None


__all__ = [
    "available_exporters",
    "resolve_exporter",
    "run_pipeline",
]
