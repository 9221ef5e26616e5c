from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector

from ..core.exceptions import StorageUnavailable
from ..core.logging_config import get_logger
from .connection import DatabaseConnection

logger = get_logger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) and commit on success.

    Driver errors surface as StorageUnavailable with the original error chained.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error(f"Cannot connect to database: {exc}")
        raise StorageUnavailable(f"Database unavailable: {exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _safe_rollback(conn)
        logger.error(f"Database operation failed: {exc}")
        raise StorageUnavailable(f"Database operation failed: {exc}") from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error as exc:
        logger.warning(f"Rollback failed: {exc}")


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_embedding(embedding: Sequence[float]) -> str:
    return json.dumps([float(v) for v in embedding])


def load_embedding(value: Any) -> tuple[float, ...]:
    """Decode an embedding stored as a JSON array (TEXT/JSON column)."""
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return tuple(float(v) for v in value)
