from typing import Dict, List, Optional

from storefront.schemas.product_schema import CategoryOut
from storefront.store.base import Store


class CategoryRepository:
    def __init__(self, store: Store):
        self.store = store

    def list(self) -> List[CategoryOut]:
        return [
            CategoryOut.model_validate(r)
            for r in self.store.select("categories", order_by="name")
        ]

    def get_by_slug(self, slug: str) -> Optional[CategoryOut]:
        row = self.store.get("categories", slug=slug)
        return CategoryOut.model_validate(row) if row else None

    def get_by_id(self, category_id: str) -> Optional[CategoryOut]:
        row = self.store.get("categories", id=category_id)
        return CategoryOut.model_validate(row) if row else None

    def create(self, values: Dict) -> CategoryOut:
        return CategoryOut.model_validate(self.store.insert("categories", [values])[0])

    def update(self, category_id: str, values: Dict) -> Optional[CategoryOut]:
        row = self.store.update("categories", category_id, values)
        return CategoryOut.model_validate(row) if row else None

    def delete(self, category_id: str) -> bool:
        with self.store.transaction():
            self.store.delete("product_categories", where={"category_id": category_id})
            return self.store.delete("categories", row_id=category_id) > 0
