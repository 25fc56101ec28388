"""Shared plumbing for store-backed services."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from panels.application.results import OperationResult
from panels.contracts.protocols import StoreClient, StoreError

logger = logging.getLogger(__name__)


def utc_now() -> str:
    """Current time as an ISO 8601 string, the format stored in timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


class StoreService:
    """Base class holding the store client.

    Subclasses wrap every store call in ``try/except StoreError`` and turn
    failures into ``OperationResult.fail("db", ...)`` via ``store_failed``.
    """

    def __init__(self, store: StoreClient) -> None:
        self.store = store

    @staticmethod
    def store_failed(message: str, error: StoreError) -> OperationResult:
        logger.warning(f"{message}: {error.message}")
        return OperationResult.fail("db", f"{message}: {error.message}")

    async def first(self, table: str, filters: dict[str, Any], **kwargs: Any) -> dict[str, Any] | None:
        """Return the first matching row or None."""
        rows = await self.store.select(table, filters, limit=1, **kwargs)
        return rows[0] if rows else None
