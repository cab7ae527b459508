import logging
import threading
import uuid
from collections import OrderedDict
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from storefront.schemas.cart_schema import CartItem
from storefront.schemas.product_schema import ProductOut

log = logging.getLogger("cart")


class CartPersistence(Protocol):
    def load(self, cart_id: str) -> List[Tuple[str, int]]:
        ...

    def save(self, cart_id: str, lines: List[CartItem]):
        ...


class CartStore:
    """
    Shopping cart for one session: (product, quantity) lines in insertion
    order, one line per product id.

    Every operation always succeeds. A line never holds quantity <= 0;
    driving a quantity to zero or below removes the line. When a
    persistence backend is attached, each mutation is saved best-effort:
    a failing save is logged and the cart keeps working in memory.
    Each mutation and its save run under a per-cart lock.
    """

    def __init__(
        self,
        cart_id: Optional[str] = None,
        persistence: Optional[CartPersistence] = None,
        items: Iterable[CartItem] = (),
    ):
        self.cart_id = cart_id
        self.persistence = persistence
        self._items: Dict[str, CartItem] = {}
        self._lock = threading.RLock()
        for it in items:
            if it.quantity > 0:
                self._items[it.product.id] = it

    @property
    def items(self) -> List[CartItem]:
        with self._lock:
            return [it.model_copy() for it in self._items.values()]

    @property
    def total_items(self) -> int:
        with self._lock:
            return sum(it.quantity for it in self._items.values())

    @property
    def total_price(self) -> float:
        with self._lock:
            return sum(it.product.price * it.quantity for it in self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def quantity_of(self, product_id: str) -> int:
        it = self._items.get(product_id)
        return it.quantity if it else 0

    def add_item(self, product: ProductOut, quantity: int = 1):
        with self._lock:
            existing = self._items.get(product.id)
            if existing:
                self._set_quantity(product.id, existing.quantity + quantity)
            elif quantity > 0:
                self._items[product.id] = CartItem(product=product, quantity=quantity)
            self._persist()

    def update_quantity(self, product_id: str, new_quantity: int):
        with self._lock:
            self._set_quantity(product_id, new_quantity)
            self._persist()

    def remove_item(self, product_id: str):
        with self._lock:
            self._items.pop(product_id, None)
            self._persist()

    def clear_cart(self):
        with self._lock:
            self._items.clear()
            self._persist()

    def _set_quantity(self, product_id: str, quantity: int):
        if quantity <= 0:
            self._items.pop(product_id, None)
            return
        it = self._items.get(product_id)
        if it:
            it.quantity = quantity

    def _persist(self):
        if not self.persistence or not self.cart_id:
            return
        try:
            self.persistence.save(self.cart_id, list(self._items.values()))
        except Exception:
            log.warning(
                "cart %s: persistence failed, keeping it in memory only",
                self.cart_id,
                exc_info=True,
            )


class CartRegistry:
    """
    Owns the carts of all sessions, keyed by the cart uuid cookie.

    At most ``max_carts`` carts stay in memory; the least recently used one
    is evicted first. A cart missing from memory is rebuilt from persistence
    on next access, and lines whose product no longer exists are dropped.
    """

    def __init__(self, persistence: Optional[CartPersistence] = None, max_carts: int = 1000):
        self.persistence = persistence
        self.max_carts = max_carts
        self._carts: "OrderedDict[str, CartStore]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._carts)

    @staticmethod
    def new_cart_id() -> str:
        return uuid.uuid4().hex

    def get(
        self,
        cart_id: Optional[str],
        load_products: Callable[[List[str]], List[ProductOut]],
    ) -> CartStore:
        cart_id = cart_id or self.new_cart_id()
        with self._lock:
            cart = self._carts.get(cart_id)
            if cart is None:
                cart = CartStore(
                    cart_id, self.persistence, self._restore(cart_id, load_products)
                )
                self._carts[cart_id] = cart
                while len(self._carts) > self.max_carts:
                    evicted, _ = self._carts.popitem(last=False)
                    log.debug("cart %s evicted from memory", evicted)
            else:
                self._carts.move_to_end(cart_id)
            return cart

    def _restore(self, cart_id, load_products) -> List[CartItem]:
        if not self.persistence:
            return []
        try:
            lines = self.persistence.load(cart_id)
            if not lines:
                return []
            products = {p.id: p for p in load_products([pid for pid, _ in lines])}
        except Exception:
            log.warning("cart %s: could not restore, starting empty", cart_id, exc_info=True)
            return []
        return [
            CartItem(product=products[pid], quantity=qty)
            for pid, qty in lines
            if pid in products and qty > 0
        ]
