import copy
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set
from uuid import uuid4

from storefront.store.base import COLLECTIONS, Store, StoreError

# collections whose rows carry created_at / updated_at stamps
_CREATED = {"products", "categories", "orders", "reviews"}
_UPDATED = {"products", "categories", "orders"}


def _sort_key(field):
    # None sorts first, like NULLS FIRST on ascending order
    def key(row):
        value = row.get(field)
        return (value is not None, value)

    return key


class MemoryStore(Store):
    """
    In-process Store used by unit tests and local experiments.

    ``fail_on`` names collections whose writes raise StoreError, which
    lets tests exercise persistence failures.
    """

    def __init__(self, fail_on: Optional[Iterable[str]] = None):
        self.data: Dict[str, List[Dict[str, Any]]] = {c: [] for c in COLLECTIONS}
        self.fail_on: Set[str] = set(fail_on or ())
        self.write_log: List[tuple] = []

    def _rows(self, collection: str) -> List[Dict[str, Any]]:
        self._check_collection(collection)
        return self.data[collection]

    def _check_writable(self, collection: str, action: str):
        if collection in self.fail_on:
            raise StoreError(f"{action} into {collection} failed (simulated)")

    @staticmethod
    def _matches(row, where=None, where_in=None, where_not=None) -> bool:
        for field, value in (where or {}).items():
            if row.get(field) != value:
                return False
        for field, values in (where_in or {}).items():
            if row.get(field) not in set(values):
                return False
        for field, value in (where_not or {}).items():
            if row.get(field) == value:
                return False
        return True

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
        where_in = {k: list(v) for k, v in (where_in or {}).items()}
        rows = [
            dict(r)
            for r in self._rows(collection)
            if self._matches(r, where, where_in, where_not)
        ]
        if order_by:
            rows = sorted(rows, key=_sort_key(order_by), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def insert(self, collection: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        target = self._rows(collection)
        self._check_writable(collection, "insert")
        now = datetime.now(timezone.utc)
        out = []
        for row in rows:
            new = dict(row)
            new.setdefault("id", uuid4().hex)
            if collection in _CREATED:
                new.setdefault("created_at", now)
            if collection in _UPDATED:
                new.setdefault("updated_at", now)
            target.append(new)
            out.append(dict(new))
        self.write_log.append(("insert", collection, len(out)))
        return out

    def update(
        self, collection: str, row_id: str, values: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        rows = self._rows(collection)
        self._check_writable(collection, "update")
        for row in rows:
            if row.get("id") == row_id:
                row.update(values)
                if collection in _UPDATED:
                    row["updated_at"] = datetime.now(timezone.utc)
                self.write_log.append(("update", collection, 1))
                return dict(row)
        return None

    def delete(
        self,
        collection: str,
        row_id: Optional[str] = None,
        where: Optional[Mapping[str, Any]] = None,
    ) -> int:
        rows = self._rows(collection)
        self._check_writable(collection, "delete")
        where = dict(where or {})
        if row_id is not None:
            where["id"] = row_id
        if not where:
            raise StoreError("Refusing to delete without a predicate")
        keep = [r for r in rows if not self._matches(r, where)]
        removed = len(rows) - len(keep)
        self.data[collection] = keep
        self.write_log.append(("delete", collection, removed))
        return removed

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy(self.data)
        try:
            yield self
        except Exception:
            self.data = snapshot
            raise
