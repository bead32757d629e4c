"""
Schema setup script for the posts exporter.

Applies `db/init.sql` to the configured database so the `sql` export type has
a `Posts` table to insert into.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import psycopg
import typer

from posts_exporter.infrastructure.db_factory import resolve_conninfo

app = typer.Typer(help="Create the Posts table used by the sql export type.")

INIT_SQL_PATH = Path(__file__).resolve().parent.parent / "db" / "init.sql"


def _build_conninfo(dsn_override: str | None, connection_name: str | None) -> str:
    if dsn_override:
        return dsn_override
    return resolve_conninfo(name=connection_name)


def _apply_schema(conninfo: str, sql_path: Path) -> None:
    with psycopg.connect(conninfo) as conn:
        with conn.cursor() as cur:
            cur.execute(sql_path.read_text(encoding="utf-8"))
        conn.commit()


def _truncate_posts(conninfo: str) -> None:
    with psycopg.connect(conninfo) as conn:
        with conn.cursor() as cur:
            cur.execute("TRUNCATE TABLE Posts;")
        conn.commit()


@app.command()
def main(
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional connection string override.",
    ),
    connection_name: str | None = typer.Option(
        None,
        "--connection",
        "-c",
        help="Connection entry to use (default from settings).",
    ),
    truncate: bool = typer.Option(
        False,
        "--truncate",
        help="Empty the Posts table after ensuring it exists.",
    ),
) -> None:
    """
    Ensure the Posts table exists, optionally emptying it.
    """
    start = time.perf_counter()
    conninfo = _build_conninfo(dsn, connection_name)

    typer.echo(f"Applying {INIT_SQL_PATH.name}...")
    _apply_schema(conninfo, INIT_SQL_PATH)
    if truncate:
        typer.echo("Truncating Posts...")
        _truncate_posts(conninfo)

    typer.echo(f"Schema ready in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
