from typing import Dict, Iterable, List, Optional, Set

from storefront.schemas.product_schema import CategoryOut, ProductOut
from storefront.store.base import Store


class ProductRepository:
    def __init__(self, store: Store):
        self.store = store

    def list(self, order_by: str = "created_at", descending: bool = True) -> List[ProductOut]:
        rows = self.store.select("products", order_by=order_by, descending=descending)
        return [ProductOut.model_validate(r) for r in rows]

    def get_by_slug(self, slug: str) -> Optional[ProductOut]:
        row = self.store.get("products", slug=slug)
        return ProductOut.model_validate(row) if row else None

    def get_by_id(self, product_id: str) -> Optional[ProductOut]:
        row = self.store.get("products", id=product_id)
        return ProductOut.model_validate(row) if row else None

    def list_by_ids(self, product_ids: Iterable[str]) -> List[ProductOut]:
        ids = list(product_ids)
        if not ids:
            return []
        rows = self.store.select("products", where_in={"id": ids})
        return [ProductOut.model_validate(r) for r in rows]

    def featured(self, limit: int = 4) -> List[ProductOut]:
        rows = self.store.select(
            "products",
            where={"featured": True},
            order_by="popularity_score",
            descending=True,
            limit=limit,
        )
        return [ProductOut.model_validate(r) for r in rows]

    def suggested(self, exclude_id: str, limit: int = 4) -> List[ProductOut]:
        rows = self.store.select("products", where_not={"id": exclude_id}, limit=limit)
        return [ProductOut.model_validate(r) for r in rows]

    def ids_for_category(self, category_id: str) -> Set[str]:
        rows = self.store.select("product_categories", where={"category_id": category_id})
        return {r["product_id"] for r in rows}

    def categories_for(self, product_id: str) -> List[CategoryOut]:
        links = self.store.select("product_categories", where={"product_id": product_id})
        if not links:
            return []
        rows = self.store.select(
            "categories",
            where_in={"id": [l["category_id"] for l in links]},
            order_by="name",
        )
        return [CategoryOut.model_validate(r) for r in rows]

    def create(self, values: Dict) -> ProductOut:
        row = self.store.insert("products", [values])[0]
        return ProductOut.model_validate(row)

    def update(self, product_id: str, values: Dict) -> Optional[ProductOut]:
        row = self.store.update("products", product_id, values)
        return ProductOut.model_validate(row) if row else None

    def delete(self, product_id: str) -> bool:
        with self.store.transaction():
            self.store.delete("product_categories", where={"product_id": product_id})
            self.store.delete("reviews", where={"product_id": product_id})
            return self.store.delete("products", row_id=product_id) > 0

    def set_categories(self, product_id: str, category_ids: Iterable[str]):
        """Replace the product's category associations."""
        ids = list(dict.fromkeys(category_ids))
        with self.store.transaction():
            self.store.delete("product_categories", where={"product_id": product_id})
            if ids:
                self.store.insert(
                    "product_categories",
                    [{"product_id": product_id, "category_id": cid} for cid in ids],
                )
