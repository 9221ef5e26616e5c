from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_db_datetime, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_embedding, fetchall, fetchone, load_embedding
from .model import Identity
from .repository import IdentityRepository

_COLUMNS = "identity_id, name, email, embedding, registered_at"


def _to_identity(row: dict) -> Identity:
    return Identity(
        identity_id=row["identity_id"],
        name=row["name"],
        email=row["email"],
        embedding=load_embedding(row["embedding"]),
        registered_at=from_db_datetime(row["registered_at"]),
    )


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, identity_id: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM identities WHERE identity_id=%s",
                (identity_id,),
            )
            row = fetchone(cur)
            return _to_identity(row) if row else None

    def get_by_email(self, email: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM identities WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            return _to_identity(row) if row else None

    def create(self, identity: Identity) -> Identity:
        # A concurrent writer may have inserted the same email; the row converges
        # to the latest values and keeps the first identity_id.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO identities(identity_id, name, email, embedding, registered_at)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), embedding=VALUES(embedding), registered_at=VALUES(registered_at)
                """,
                (
                    identity.identity_id,
                    identity.name,
                    identity.email,
                    dump_embedding(identity.embedding),
                    to_db_datetime(identity.registered_at),
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM identities WHERE email=%s", (identity.email,))
            return _to_identity(fetchone(cur))

    def update(self, identity: Identity) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE identities
                SET name=%s, embedding=%s, registered_at=%s
                WHERE identity_id=%s
                """,
                (
                    identity.name,
                    dump_embedding(identity.embedding),
                    to_db_datetime(identity.registered_at),
                    identity.identity_id,
                ),
            )
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM identities ORDER BY seq ASC")
            return [_to_identity(r) for r in fetchall(cur)]
