"""
Database connection factory for the posts exporter.

Resolves the configured connection string and opens a dedicated psycopg
connection, retrying transient connection failures with tenacity. The SQL
exporter holds exactly one connection for the whole batch, so no pool is
managed here.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from posts_exporter.config import Settings, get_settings
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)


def resolve_conninfo(settings: Optional[Settings] = None, name: Optional[str] = None) -> str:
    """
    Return the connection string stored under `name` (or `settings.connection_name`).

    Raises
    ------
    MissingConnectionStringError
        If the entry is not configured.
    """
    settings = settings or get_settings()
    return settings.get_connection_string(name)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(conninfo: str) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    The connection is opened in non-autocommit mode, so the first statement
    begins a transaction.

    Parameters
    ----------
    conninfo : str
        libpq connection string or URL.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    log.debug("Opening database connection")
    return psycopg.connect(conninfo, autocommit=False)


__all__ = [
    "get_sync_connection",
    "resolve_conninfo",
]
