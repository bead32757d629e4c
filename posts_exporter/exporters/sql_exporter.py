"""
Database exporter: insert every post into the `Posts` table in one transaction.

All inserts share a single connection and a single transaction. The batch is
committed only if every insert succeeds; otherwise it is rolled back and the
original error is re-raised, so no partial batch is ever persisted.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import psycopg
from psycopg import Connection
from psycopg.conninfo import conninfo_to_dict

from posts_exporter.config import Settings, get_settings
from posts_exporter.domain.models import Post
from posts_exporter.exporters.abstract import AbstractExporter, ExportResult
from posts_exporter.infrastructure.db_factory import get_sync_connection, resolve_conninfo
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)

INSERT_POST_SQL = (
    "INSERT INTO Posts (UserId, Id, Title, Body, HashId) "
    "VALUES (%(UserId)s, %(Id)s, %(Title)s, %(Body)s, %(HashId)s)"
)


def describe_target(conninfo: str) -> str:
    """Render a connection string as `host:port/dbname` without credentials."""
    try:
        params = conninfo_to_dict(conninfo)
    except psycopg.ProgrammingError:
        return "database"
    host = params.get("host") or "localhost"
    port = params.get("port") or "5432"
    dbname = params.get("dbname") or ""
    return f"{host}:{port}/{dbname}"


class SqlExporter(AbstractExporter):
    """
    Insert posts with an explicit parameterized INSERT per record.

    Parameters
    ----------
    settings : Settings | None
        Source of the connection string. Defaults to `get_settings()`.
    conninfo_override : str | None
        Use this connection string instead of the configured entry.
    connect : Callable[[str], Connection]
        Connection factory; defaults to the retrying `get_sync_connection`.
    """

    name: str = "sql"
    description: str = "Transactional INSERT of every post into the Posts table."

    def __init__(
        self,
        settings: Optional[Settings] = None,
        conninfo_override: Optional[str] = None,
        connect: Callable[[str], Connection] = get_sync_connection,
    ) -> None:
        self._settings = settings
        self._conninfo_override = conninfo_override
        self._connect = connect

    def _conninfo(self) -> str:
        if self._conninfo_override:
            return self._conninfo_override
        return resolve_conninfo(self._settings or get_settings())

    def _connection_label(self) -> str:
        if self._conninfo_override:
            return "connection override"
        return f"connection '{(self._settings or get_settings()).connection_name}'"

    def export(self, posts: List[Post]) -> ExportResult:
        conninfo = self._conninfo()
        target = describe_target(conninfo)
        conn = self._connect(conninfo)

        try:
            try:
                with conn.cursor() as cur:
                    for post in posts:
                        cur.execute(INSERT_POST_SQL, post.as_params())
                conn.commit()
            except Exception:
                conn.rollback()
                log.exception(
                    "Insert failed; transaction rolled back",
                    extra={"exporter": self.name, "records": len(posts), "destination": target},
                )
                raise
        finally:
            conn.close()

        log.info(
            f"Inserted {len(posts)} posts into {target}",
            extra={"exporter": self.name, "records": len(posts), "destination": target},
        )
        return ExportResult(
            exporter=self.name,
            records=len(posts),
            destination=target,
            notes=f"Committed in one transaction via {self._connection_label()}",
        )


__all__ = ["INSERT_POST_SQL", "SqlExporter", "describe_target"]
