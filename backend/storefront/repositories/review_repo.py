from typing import Dict, List, Optional

from storefront.schemas.review_schema import AdminReviewOut, ReviewOut
from storefront.store.base import Store


class ReviewRepository:
    def __init__(self, store: Store):
        self.store = store

    def create(self, values: Dict) -> ReviewOut:
        return ReviewOut.model_validate(self.store.insert("reviews", [values])[0])

    def approved_for_product(self, product_id: str) -> List[ReviewOut]:
        rows = self.store.select(
            "reviews",
            where={"product_id": product_id, "approved": True},
            order_by="created_at",
            descending=True,
        )
        return [ReviewOut.model_validate(r) for r in rows]

    def list_with_product_names(self) -> List[AdminReviewOut]:
        rows = self.store.select("reviews", order_by="created_at", descending=True)
        product_ids = list({r["product_id"] for r in rows})
        names = {}
        if product_ids:
            names = {
                p["id"]: p["name"]
                for p in self.store.select("products", where_in={"id": product_ids})
            }
        return [
            AdminReviewOut.model_validate(dict(r, product_name=names.get(r["product_id"])))
            for r in rows
        ]

    def set_approval(self, review_id: str, approved: bool) -> Optional[ReviewOut]:
        row = self.store.update("reviews", review_id, {"approved": approved})
        return ReviewOut.model_validate(row) if row else None
