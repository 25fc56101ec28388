"""Contracts module - protocols shared by the application and infrastructure layers.

Example:
    ```python
    from panels.contracts import StoreClient, StoreError

    async def count_users(store: StoreClient) -> int:
        return len(await store.select("users"))
    ```
"""

from .protocols import Filters, Row, StoreClient, StoreError

__all__ = ["Filters", "Row", "StoreClient", "StoreError"]
