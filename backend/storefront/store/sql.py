from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.category import Category, ProductCategory
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.review import Review
from storefront.store.base import Store, StoreError
from storefront.utils.transactions import smart_transaction

MODELS = {
    "products": Product,
    "categories": Category,
    "product_categories": ProductCategory,
    "orders": Order,
    "order_items": OrderItem,
    "reviews": Review,
}


class SqlStore(Store):
    """Store backed by the SQLAlchemy models, bound to one Session."""

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    def _model(self, collection: str):
        self._check_collection(collection)
        return MODELS[collection]

    @staticmethod
    def _to_dict(obj) -> Dict[str, Any]:
        return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}

    def _filtered(self, model, where=None, where_in=None, where_not=None):
        qry = self.db.query(model)
        for field, value in (where or {}).items():
            qry = qry.filter(getattr(model, field) == value)
        for field, values in (where_in or {}).items():
            qry = qry.filter(getattr(model, field).in_(list(values)))
        for field, value in (where_not or {}).items():
            qry = qry.filter(getattr(model, field) != value)
        return qry

    def _commit(self):
        # inside transaction() the enclosing unit commits
        if not self._depth:
            self.db.commit()

    def _fail(self, exc: SQLAlchemyError, action: str):
        if not self._depth:
            self.db.rollback()
        raise StoreError(f"{action} failed: {exc}") from exc

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
        model = self._model(collection)
        try:
            qry = self._filtered(model, where, where_in, where_not)
            if order_by:
                col = getattr(model, order_by)
                qry = qry.order_by(col.desc() if descending else col)
            if limit is not None:
                qry = qry.limit(limit)
            return [self._to_dict(o) for o in qry.all()]
        except SQLAlchemyError as e:
            self._fail(e, f"select from {collection}")

    def insert(self, collection: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        model = self._model(collection)
        try:
            objs = [model(**row) for row in rows]
            self.db.add_all(objs)
            self.db.flush()
            out = [self._to_dict(o) for o in objs]
            self._commit()
            return out
        except SQLAlchemyError as e:
            self._fail(e, f"insert into {collection}")

    def update(
        self, collection: str, row_id: str, values: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        model = self._model(collection)
        try:
            obj = self.db.query(model).filter(model.id == row_id).first()
            if not obj:
                return None
            for field, value in values.items():
                setattr(obj, field, value)
            self.db.flush()
            out = self._to_dict(obj)
            self._commit()
            return out
        except SQLAlchemyError as e:
            self._fail(e, f"update {collection}")

    def delete(
        self,
        collection: str,
        row_id: Optional[str] = None,
        where: Optional[Mapping[str, Any]] = None,
    ) -> int:
        model = self._model(collection)
        where = dict(where or {})
        if row_id is not None:
            where["id"] = row_id
        if not where:
            raise StoreError("Refusing to delete without a predicate")
        try:
            objs = self._filtered(model, where).all()
            for obj in objs:
                self.db.delete(obj)
            self.db.flush()
            self._commit()
            return len(objs)
        except SQLAlchemyError as e:
            self._fail(e, f"delete from {collection}")

    @contextmanager
    def transaction(self):
        nested = self._depth > 0
        self._depth += 1
        try:
            with smart_transaction(self.db, nested=nested):
                yield self
        except SQLAlchemyError as e:
            raise StoreError(f"transaction failed: {e}") from e
        finally:
            self._depth -= 1
