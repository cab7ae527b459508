from abc import ABC, abstractmethod
from typing import Any, ContextManager, Dict, Iterable, List, Mapping, Optional

COLLECTIONS = (
    "products",
    "categories",
    "product_categories",
    "orders",
    "order_items",
    "reviews",
)


class StoreError(Exception):
    """Persistence failure reported by a store backend."""


class Store(ABC):
    """
    Query/insert/update/delete over named collections.

    Rows go in and come out as plain dicts. Filters are equality
    (``where``), membership (``where_in``) and inequality (``where_not``)
    predicates, all AND-ed together. Ordering by a single field is stable.
    """

    @abstractmethod
    def select(
        self,
        collection: str,
        where: Optional[Mapping[str, Any]] = None,
        where_in: Optional[Mapping[str, Iterable[Any]]] = None,
        where_not: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def insert(self, collection: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def update(
        self, collection: str, row_id: str, values: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update one row by id. Returns the updated row, or None if absent."""

    @abstractmethod
    def delete(
        self,
        collection: str,
        row_id: Optional[str] = None,
        where: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """Delete by id and/or predicate. Returns the number of rows removed."""

    @abstractmethod
    def transaction(self) -> ContextManager["Store"]:
        """Group writes into one unit: all of them persist or none do."""

    def get(self, collection: str, **where) -> Optional[Dict[str, Any]]:
        rows = self.select(collection, where=where, limit=1)
        return rows[0] if rows else None

    def health_check(self) -> bool:
        try:
            self.select("categories", limit=1)
            return True
        except StoreError:
            return False

    @staticmethod
    def _check_collection(collection: str):
        if collection not in COLLECTIONS:
            raise StoreError(f"Unknown collection: {collection}")
