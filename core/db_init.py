"""Create and return the store connection (PostgreSQL or SQLite).
Schema creation is delegated to `services.init_db(conn)` so table
definitions live in one place.
"""
import logging
import os
import sqlite3
from urllib.parse import urlsplit, urlunsplit

from core.config import Settings
from core.services import StoreError, init_db as init_schema

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Connection URL with any password removed, for log lines."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.hostname or ""
    if parts.username:
        netloc = f"{parts.username}:***@{netloc}"
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit(parts._replace(netloc=netloc))


def init_db(settings: Settings):
    """Open the configured store and make sure the tables exist.

    ``sqlite:///path`` URLs open a local file (handy for development);
    anything else is handed to psycopg2 with the access key as password.
    Connection caching is handled by ``st.cache_resource`` in app.py.
    """
    if settings.is_sqlite:
        conn = _connect_sqlite(settings.sqlite_path)
    else:
        import psycopg2

        try:
            # Supabase requires SSL
            conn = psycopg2.connect(
                settings.store_url,
                password=settings.store_key,
                sslmode="require",
                connect_timeout=10,
                options="-c statement_timeout=30000",
            )
            conn.autocommit = False
        except psycopg2.Error as e:
            logger.exception("PostgreSQL connection to %s failed", redact_url(settings.store_url))
            raise StoreError(f"Could not connect to the database: {e}") from e
        logger.info("Connected to %s", redact_url(settings.store_url))

    init_schema(conn)
    return conn


def _connect_sqlite(path: str) -> sqlite3.Connection:
    """Create local SQLite connection (ensures the parent dir exists)."""
    if path != ":memory:":
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
    logger.info("Using SQLite database at %s", path)
    return sqlite3.connect(path, check_same_thread=False)
