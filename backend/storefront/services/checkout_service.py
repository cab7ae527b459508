import logging
import threading
import time
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from storefront.adapters.notifier import Notifier
from storefront.config import settings
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order_schema import CheckoutForm, OrderStatus, OrderWithItems
from storefront.schemas.product_schema import ProductOut
from storefront.services.cart_store import CartStore
from storefront.services.exceptions import NotFoundError
from storefront.services.notifications import (
    send_admin_notification,
    send_order_status_email,
)
from storefront.store.base import Store, StoreError

log = logging.getLogger("checkout")

# shown when a field is missing or of the wrong type altogether
FIELD_MESSAGES = {
    "customer_name": "Name must be at least 2 characters",
    "customer_email": "Invalid email address",
    "customer_phone": "Phone number must be at least 10 digits",
    "shipping_address": "Address must be at least 10 characters",
    "city": "City is required",
    "postal_code": "Postal code is required",
    "notes": "Notes must be at most 500 characters",
}


class CheckoutValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("Invalid checkout details")
        self.errors = errors


class CheckoutError(Exception):
    """The order could not be stored; the user may resubmit."""


def validate_checkout(data: Dict) -> CheckoutForm:
    """Validate checkout fields, collecting one message per failing field."""
    try:
        return CheckoutForm.model_validate(data)
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "__root__"
            if field in errors:
                continue
            if err["type"] == "value_error" and field != "customer_email":
                errors[field] = str(err["ctx"]["error"])
            else:
                errors[field] = FIELD_MESSAGES.get(field, err["msg"])
        raise CheckoutValidationError(errors)


def shipping_cost_for(subtotal: float) -> float:
    return 0 if subtotal >= settings.FREE_SHIPPING_THRESHOLD else settings.SHIPPING_COST


def totals_for(subtotal: float) -> Dict[str, float]:
    shipping = shipping_cost_for(subtotal)
    return {"subtotal": subtotal, "shipping_cost": shipping, "total": subtotal + shipping}


def quote(cart: CartStore) -> Dict[str, float]:
    return totals_for(cart.total_price)


class OrderNumberGenerator:
    """ORD-<milliseconds>, strictly increasing within the process."""

    def __init__(self, clock=time.time):
        self.clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            stamp = max(int(self.clock() * 1000), self._last + 1)
            self._last = stamp
        return f"ORD-{stamp}"


order_numbers = OrderNumberGenerator()


class CheckoutService:
    def __init__(
        self,
        store: Store,
        notifier: Notifier,
        numbers: Optional[OrderNumberGenerator] = None,
    ):
        self.store = store
        self.notifier = notifier
        self.numbers = numbers or order_numbers
        self.orders = OrderRepository(store)
        self.products = ProductRepository(store)

    def place_order(self, cart: CartStore, data: Dict) -> Dict:
        """
        Validate, store the order and its items as one unit, then send the
        customer confirmation and admin alert independently (best-effort),
        then clear the cart.

        Raises CheckoutValidationError (bad form, or a product gone or out of
        stock; nothing written) or CheckoutError
        (store failure: nothing kept, no emails, cart untouched).
        """
        if cart.is_empty():
            raise CheckoutValidationError({"cart": "Your cart is empty"})
        form = validate_checkout(data)
        try:
            lines = self._current_lines(cart)
        except StoreError as e:
            log.error("Error loading cart products: %s", e)
            raise CheckoutError("Failed to place order. Please try again.") from e
        totals = totals_for(sum(product.price * qty for product, qty in lines))

        order_row = {
            "order_number": self.numbers.next(),
            "customer_name": form.customer_name,
            "customer_email": str(form.customer_email),
            "customer_phone": form.customer_phone,
            "shipping_address": form.shipping_address,
            "city": form.city,
            "postal_code": form.postal_code,
            "notes": form.notes,
            "country": settings.DEFAULT_COUNTRY,
            "status": OrderStatus.PENDING.value,
            **totals,
        }
        item_rows = [
            {
                "product_id": product.id,
                "product_name": product.name,
                "product_price": product.price,
                "quantity": qty,
                "total": product.price * qty,
            }
            for product, qty in lines
        ]
        try:
            order = self.orders.create_with_items(order_row, item_rows)
        except StoreError as e:
            log.error("Error placing order: %s", e)
            raise CheckoutError("Failed to place order. Please try again.") from e
        log.info("order %s placed, total=%.2f", order.order_number, order.total)

        send_order_status_email(
            self.notifier,
            order.customer_email,
            order.customer_name,
            order.order_number,
            "confirmed",
            f"Thank you for your order! Your order {order.order_number} has been "
            "confirmed and will be processed soon.",
        )
        send_admin_notification(
            self.notifier, order.order_number, order.customer_name, order.total
        )

        cart.clear_cart()
        return {
            "order_id": order.id,
            "order_number": order.order_number,
            "subtotal": order.subtotal,
            "shipping_cost": order.shipping_cost,
            "total": order.total,
        }

    def _current_lines(self, cart: CartStore) -> List[Tuple[ProductOut, int]]:
        """
        Pair each cart line with the product as currently stored. Orders are
        priced from these, never from the snapshots held in the cart.
        """
        items = cart.items
        current = {p.id: p for p in self.products.list_by_ids([it.product.id for it in items])}
        lines = []
        for it in items:
            product = current.get(it.product.id)
            if product is None or not product.purchasable:
                raise CheckoutValidationError(
                    {"cart": f"{it.product.name} is no longer available"}
                )
            lines.append((product, it.quantity))
        return lines

    def get_order(self, order_number: str) -> OrderWithItems:
        order = self.orders.get_by_number(order_number)
        if not order:
            raise NotFoundError("Order not found")
        items = self.orders.items_for([order.id]).get(order.id, [])
        products = {p.id: p for p in self.products.list_by_ids({i.product_id for i in items})}
        for item in items:
            p = products.get(item.product_id)
            if p:
                item.product_slug = p.slug
                item.product_image_url = p.image_url
        return OrderWithItems(**order.model_dump(), order_items=items)
