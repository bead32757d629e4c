from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from posts_exporter.config import get_settings
from posts_exporter.exporters.sql_exporter import describe_target
from posts_exporter.orchestrator import available_exporters, resolve_exporter, run_pipeline
from posts_exporter.reporter import print_exporters, print_summary
from posts_exporter.utils.logging import configure_logging, get_logger

log = get_logger(__name__)

app = typer.Typer(help="Fetch posts, stamp them with hash ids, and export them.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    connections = ", ".join(
        f"{name}={describe_target(conninfo)}"
        for name, conninfo in sorted(settings.connection_strings.items())
    )
    typer.echo(
        f"source={settings.source_url} | export_type={settings.export_type} "
        f"output_dir={settings.output_dir} | retries={settings.retry_attempts} "
        f"backoff_base={settings.retry_backoff_base}s"
    )
    typer.echo(
        f"connection_name={settings.connection_name} | connections=[{connections or 'none'}]"
    )


@app.command()
def exporters() -> None:
    """
    List available export types.
    """
    settings = get_settings()
    descriptions = {
        name: resolve_exporter(name, settings).description for name in available_exporters()
    }
    print_exporters(descriptions)


@app.command()
def run(
    export_type: Optional[str] = typer.Option(
        None,
        "--export-type",
        "-e",
        help="Export type override (json, csv, sql). Defaults to ExportType from settings.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for posts.json / posts.csv (default from settings).",
    ),
) -> None:
    """
    Fetch posts, assign hash ids, and export them.
    """
    try:
        settings = get_settings()
    except Exception as exc:  # noqa: BLE001 - bad configuration is a pipeline failure too
        configure_logging()
        log.exception("Failed to load settings")
        typer.echo(f"An error occurred: {exc}")
        return

    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    if output_dir is not None:
        settings = settings.model_copy(update={"output_dir": str(output_dir)})

    result = run_pipeline(settings=settings, export_type=export_type)
    if result is not None:
        print_summary(result)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
