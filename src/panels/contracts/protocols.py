"""Data access protocols for dependency injection.

Services talk to the hosted relational store through ``StoreClient``. The
REST client and the in-memory store both satisfy it, which keeps services
testable without network access.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Row = dict[str, Any]
Filters = dict[str, Any]


class StoreError(Exception):
    """Raised when the store rejects or cannot serve a request.

    Attributes:
        message: Server or transport message, safe to show to the user.
        table: Collection the request targeted.
        status_code: HTTP status of the failed response, if any.
        code: Store-specific error code (e.g. a SQLSTATE), if any.
    """

    def __init__(
        self,
        message: str,
        table: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.table = table
        self.status_code = status_code
        self.code = code
        super().__init__(message)


@runtime_checkable
class StoreClient(Protocol):
    """Generic query/insert/update/delete client over named collections.

    Filters map a column to a value. A list or tuple value means
    "column is one of these values"; any other value means equality.

    Example:
        ```python
        rows = await store.select(
            "user_designs",
            {"project_id": project_id, "is_active": True},
            order_by="last_modified",
            ascending=False,
        )
        ```
    """

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
        """Return rows matching every filter."""
        ...

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows and return them as stored (with generated keys)."""
        ...

    async def upsert(self, table: str, rows: list[Row], on_conflict: str) -> list[Row]:
        """Insert rows, merging into existing rows that collide on ``on_conflict``.

        ``on_conflict`` is a comma separated list of column names.
        """
        ...

    async def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        """Update matching rows and return them."""
        ...

    async def delete(self, table: str, filters: Filters) -> list[Row]:
        """Delete matching rows and return them."""
        ...
