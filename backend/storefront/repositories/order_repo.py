from typing import Dict, List, Optional

from storefront.schemas.order_schema import OrderItemOut, OrderOut, OrderWithItems
from storefront.store.base import Store


class OrderRepository:
    def __init__(self, store: Store):
        self.store = store

    def create_with_items(self, order: Dict, items: List[Dict]) -> OrderWithItems:
        """
        Insert the order, then its items, as one unit. Items get the new
        order id; if either insert fails nothing is kept.
        """
        with self.store.transaction():
            order_row = self.store.insert("orders", [order])[0]
            item_rows = self.store.insert(
                "order_items", [dict(it, order_id=order_row["id"]) for it in items]
            )
        return OrderWithItems.model_validate(
            dict(order_row, order_items=[OrderItemOut.model_validate(r) for r in item_rows])
        )

    def get_by_number(self, order_number: str) -> Optional[OrderOut]:
        row = self.store.get("orders", order_number=order_number)
        return OrderOut.model_validate(row) if row else None

    def get_by_id(self, order_id: str) -> Optional[OrderOut]:
        row = self.store.get("orders", id=order_id)
        return OrderOut.model_validate(row) if row else None

    def items_for(self, order_ids: List[str]) -> Dict[str, List[OrderItemOut]]:
        grouped: Dict[str, List[OrderItemOut]] = {oid: [] for oid in order_ids}
        if not order_ids:
            return grouped
        for row in self.store.select("order_items", where_in={"order_id": order_ids}):
            grouped.setdefault(row["order_id"], []).append(OrderItemOut.model_validate(row))
        return grouped

    def list(self) -> List[OrderOut]:
        rows = self.store.select("orders", order_by="created_at", descending=True)
        return [OrderOut.model_validate(r) for r in rows]

    def list_with_items(self) -> List[OrderWithItems]:
        orders = self.list()
        items = self.items_for([o.id for o in orders])
        return [
            OrderWithItems(**o.model_dump(), order_items=items.get(o.id, []))
            for o in orders
        ]

    def update_status(self, order_id: str, status: str) -> Optional[OrderOut]:
        row = self.store.update("orders", order_id, {"status": status})
        return OrderOut.model_validate(row) if row else None
