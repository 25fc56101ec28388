"""In-process store used for tests and offline runs."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any

from panels.contracts.protocols import Filters, Row, StoreError


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _matches(row: Row, filters: Filters | None) -> bool:
    for column, expected in (filters or {}).items():
        actual = row.get(column)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(column: str):
    # None sorts first, like NULLS FIRST on an ascending index
    def key(row: Row) -> tuple[int, Any]:
        value = row.get(column)
        return (0, "") if value is None else (1, value)

    return key


class InMemoryStore:
    """Dict-of-lists implementation of StoreClient.

    Inserted rows get a uuid4 ``id`` and a ``created_at`` timestamp when
    they do not bring their own. Updates refresh ``last_modified`` on rows
    that carry the column. Rows handed out are copies, so callers cannot
    mutate the stored state by accident.

    Example:
        >>> store = InMemoryStore()
        >>> await store.insert("users", [{"email": "a@b.c"}])
        >>> await store.select("users", {"email": "a@b.c"})
    """

    def __init__(self, tables: dict[str, list[Row]] | None = None) -> None:
        self.tables: dict[str, list[Row]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }

    def _table(self, table: str) -> list[Row]:
        return self.tables.setdefault(table, [])

    def _stamp(self, row: Row) -> Row:
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", _now())
        return stored

    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        columns: str = "*",
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[Row]:
        rows = [row for row in self._table(table) if _matches(row, filters)]
        if order_by:
            rows.sort(key=_sort_key(order_by), reverse=not ascending)
        if limit is not None:
            rows = rows[:limit]
        if columns.strip() != "*":
            wanted = [c.strip() for c in columns.split(",") if c.strip()]
            rows = [{c: row.get(c) for c in wanted} for row in rows]
        return copy.deepcopy(rows)

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        stored = [self._stamp(row) for row in rows]
        self._table(table).extend(stored)
        return copy.deepcopy(stored)

    async def upsert(self, table: str, rows: list[Row], on_conflict: str) -> list[Row]:
        keys = [k.strip() for k in on_conflict.split(",") if k.strip()]
        if not keys:
            raise StoreError("on_conflict must name at least one column", table=table)
        existing = self._table(table)
        result: list[Row] = []
        for row in rows:
            match = next(
                (
                    current
                    for current in existing
                    if all(current.get(k) == row.get(k) for k in keys)
                ),
                None,
            )
            if match is None:
                match = self._stamp(row)
                existing.append(match)
            else:
                match.update(copy.deepcopy(row))
            result.append(copy.deepcopy(match))
        return result

    async def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        if not filters:
            raise StoreError(f"Refusing to update every row of {table}", table=table)
        updated: list[Row] = []
        for row in self._table(table):
            if _matches(row, filters):
                row.update(copy.deepcopy(values))
                if "last_modified" in row and "last_modified" not in values:
                    row["last_modified"] = _now()
                updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table: str, filters: Filters) -> list[Row]:
        if not filters:
            raise StoreError(f"Refusing to delete every row of {table}", table=table)
        kept: list[Row] = []
        removed: list[Row] = []
        for row in self._table(table):
            (removed if _matches(row, filters) else kept).append(row)
        self.tables[table] = kept
        return copy.deepcopy(removed)
