import logging
from typing import Dict, List, Optional

from storefront.adapters.notifier import Notifier
from storefront.repositories.category_repo import CategoryRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.order_schema import OrderOut, OrderStatus, OrderWithItems
from storefront.schemas.product_schema import (
    CategoryIn,
    CategoryOut,
    ProductIn,
    ProductOut,
    ProductWithCategories,
)
from storefront.schemas.review_schema import AdminReviewOut, ReviewOut
from storefront.services.exceptions import NotFoundError
from storefront.services.notifications import send_order_status_email
from storefront.store.base import Store
from storefront.utils.slug import make_slug

log = logging.getLogger("admin")


class AdminServiceException(Exception):
    pass


class AdminService:
    def __init__(self, store: Store, notifier: Notifier):
        self.store = store
        self.notifier = notifier
        self.orders = OrderRepository(store)
        self.products = ProductRepository(store)
        self.categories = CategoryRepository(store)
        self.reviews = ReviewRepository(store)

    # --- orders ---

    def get_orders(self) -> List[OrderWithItems]:
        return self.orders.list_with_items()

    def get_stats(self) -> Dict:
        orders = self.orders.list_with_items()
        return {
            "total_orders": len(orders),
            "pending_orders": sum(1 for o in orders if o.status == OrderStatus.PENDING),
            "total_revenue": sum(o.total for o in orders),
            "recent_orders": orders[:5],
        }

    def update_order_status(self, order_id: str, status: OrderStatus) -> OrderOut:
        """Change the status, then tell the customer (best-effort)."""
        order = self.orders.update_status(order_id, OrderStatus(status).value)
        if not order:
            raise NotFoundError("Order not found")
        log.info("order %s -> %s", order.order_number, order.status.value)
        send_order_status_email(
            self.notifier,
            order.customer_email,
            order.customer_name,
            order.order_number,
            order.status.value,
        )
        return order

    # --- products ---

    def list_products(self) -> List[ProductWithCategories]:
        return [
            ProductWithCategories(
                **p.model_dump(exclude={"discount_percent", "purchasable"}),
                categories=self.products.categories_for(p.id),
            )
            for p in self.products.list(order_by="name", descending=False)
        ]

    def _product_values(self, data: ProductIn) -> Dict:
        values = data.model_dump(exclude={"category_ids"})
        values["stock_status"] = data.stock_status.value
        values["slug"] = make_slug(data.name)
        return values

    def _check_slug_free(self, slug: str, collection: str, own_id: Optional[str] = None):
        row = self.store.get(collection, slug=slug)
        if row and row["id"] != own_id:
            raise AdminServiceException(f"Slug already in use: {slug}")

    def _check_categories(self, category_ids: List[str]):
        for cid in category_ids:
            if not self.categories.get_by_id(cid):
                raise AdminServiceException(f"Unknown category: {cid}")

    def create_product(self, data: ProductIn) -> ProductOut:
        values = self._product_values(data)
        self._check_slug_free(values["slug"], "products")
        if data.category_ids:
            self._check_categories(data.category_ids)
        with self.store.transaction():
            product = self.products.create(values)
            if data.category_ids:
                self.products.set_categories(product.id, data.category_ids)
        return product

    def update_product(self, product_id: str, data: ProductIn) -> ProductOut:
        values = self._product_values(data)
        self._check_slug_free(values["slug"], "products", own_id=product_id)
        if data.category_ids:
            self._check_categories(data.category_ids)
        with self.store.transaction():
            product = self.products.update(product_id, values)
            if not product:
                raise NotFoundError("Product not found")
            if data.category_ids is not None:
                self.products.set_categories(product_id, data.category_ids)
        return product

    def delete_product(self, product_id: str):
        if not self.products.delete(product_id):
            raise NotFoundError("Product not found")

    def set_product_categories(self, product_id: str, category_ids: List[str]):
        if not self.products.get_by_id(product_id):
            raise NotFoundError("Product not found")
        self._check_categories(category_ids)
        self.products.set_categories(product_id, category_ids)

    # --- categories ---

    def list_categories(self) -> List[CategoryOut]:
        return self.categories.list()

    def create_category(self, data: CategoryIn) -> CategoryOut:
        slug = make_slug(data.name)
        self._check_slug_free(slug, "categories")
        return self.categories.create({**data.model_dump(), "slug": slug})

    def update_category(self, category_id: str, data: CategoryIn) -> CategoryOut:
        slug = make_slug(data.name)
        self._check_slug_free(slug, "categories", own_id=category_id)
        category = self.categories.update(category_id, {**data.model_dump(), "slug": slug})
        if not category:
            raise NotFoundError("Category not found")
        return category

    def delete_category(self, category_id: str):
        if not self.categories.delete(category_id):
            raise NotFoundError("Category not found")

    # --- reviews ---

    def list_reviews(self) -> List[AdminReviewOut]:
        return self.reviews.list_with_product_names()

    def set_review_approval(self, review_id: str, approved: bool) -> ReviewOut:
        review = self.reviews.set_approval(review_id, approved)
        if not review:
            raise NotFoundError("Review not found")
        return review
