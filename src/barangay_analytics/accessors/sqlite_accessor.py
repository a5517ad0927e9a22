"""SQLite-backed snapshot of normalized records for offline analysis."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from barangay_analytics.domain.interfaces import IRecordAccessor
from barangay_analytics.domain.models import Record, RecordKind

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS records (
    id TEXT NOT NULL,
    kind TEXT NOT NULL,
    created_at TEXT NOT NULL,
    payload TEXT NOT NULL,
    PRIMARY KEY (kind, id)
);
"""

_INSERT_SQL = """
INSERT INTO records (id, kind, created_at, payload)
VALUES (?, ?, ?, ?)
ON CONFLICT(kind, id) DO UPDATE SET
    created_at=excluded.created_at,
    payload=excluded.payload;
"""

_SELECT_ALL_SQL = """
SELECT payload FROM records
ORDER BY created_at ASC, rowid ASC;
"""

_SELECT_BY_KIND_SQL = """
SELECT payload FROM records
WHERE kind = ?
ORDER BY created_at ASC, rowid ASC;
"""

_SELECT_BY_DATE_SQL = """
SELECT payload FROM records
WHERE created_at BETWEEN ? AND ?
ORDER BY created_at ASC, rowid ASC;
"""


class SQLiteRecordAccessor(IRecordAccessor):
    """Reads records from a local snapshot table.

    ``store`` loads a snapshot taken from another accessor; the analytics
    pipeline itself only reads.
    """

    def __init__(self, db_path: str | Path, kind: Optional[RecordKind] = None):
        self._db_path = str(db_path)
        self._kind = kind
        self._ensure_schema()

    def fetch(self) -> List[Record]:
        if self._kind is None:
            return self.find_all()
        return self.find_by_kind(self._kind)

    def store(self, records: Iterable[Record]) -> int:
        rows = [
            (
                record.id,
                record.kind.value,
                record.created_at.isoformat(),
                record.model_dump_json(),
            )
            for record in records
        ]
        with sqlite3.connect(self._db_path) as conn:
            conn.executemany(_INSERT_SQL, rows)
            conn.commit()
        return len(rows)

    def find_all(self) -> List[Record]:
        return self._select(_SELECT_ALL_SQL, ())

    def find_by_kind(self, kind: RecordKind) -> List[Record]:
        return self._select(_SELECT_BY_KIND_SQL, (kind.value,))

    def find_by_date(self, start: datetime, end: datetime) -> List[Record]:
        """Records created within the inclusive ``[start, end]`` window."""

        return self._select(_SELECT_BY_DATE_SQL, (start.isoformat(), end.isoformat()))

    def _ensure_schema(self) -> None:
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(_CREATE_TABLE_SQL)
            conn.commit()

    def _select(self, sql: str, params: Tuple[str, ...]) -> List[Record]:
        with sqlite3.connect(self._db_path) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [Record.model_validate_json(payload) for (payload,) in rows]
