from __future__ import annotations

import json
from typing import Sequence

from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import FormEntry
from .repository import CatalogRepository


def _decode_classes(form: int, raw) -> tuple[str, ...]:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    try:
        values = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        values = None
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise StorageError(f"Classes for form {form} are not a JSON array; run scripts/migrate_db.py")
    return tuple(values)


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[FormEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT form, name, classes FROM forms ORDER BY form")
            rows = fetchall(cur)
            return [
                FormEntry(
                    form=int(r["form"]),
                    name=r["name"],
                    classes=_decode_classes(int(r["form"]), r["classes"]),
                )
                for r in rows
            ]

    def insert(self, entry: FormEntry) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO forms(form, name, classes) VALUES(%s,%s,%s)",
                (entry.form, entry.name, json.dumps(list(entry.classes))),
            )
