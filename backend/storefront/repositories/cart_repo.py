import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from storefront.db import SessionLocal  # short-lived sessions, carts outlive a request
from storefront.models.cart import Cart
from storefront.models.cart_item import CartItem
from storefront.schemas.cart_schema import CartItem as CartLine

log = logging.getLogger("cart")


class CartRepository:
    """
    Persists cart lines per cart uuid. Used as the CartStore's optional
    persistence: errors propagate to the store, which logs and carries on
    in memory.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def _get_or_create(self, s: Session, cart_uuid: str) -> Cart:
        c = s.query(Cart).filter(Cart.cart_uuid == cart_uuid).first()
        if not c:
            c = Cart(cart_uuid=cart_uuid)
            s.add(c)
            s.flush()
        return c

    def load(self, cart_uuid: str) -> List[Tuple[str, int]]:
        with self.session_factory() as s:
            c = s.query(Cart).filter(Cart.cart_uuid == cart_uuid).first()
            if not c:
                return []
            return [(it.product_id, it.quantity) for it in c.items]

    def save(self, cart_uuid: str, lines: List[CartLine]):
        with self.session_factory() as s:
            c = self._get_or_create(s, cart_uuid)
            # replace wholesale; carts are small
            c.items.clear()
            s.flush()
            for pos, line in enumerate(lines):
                c.items.append(
                    CartItem(
                        product_id=line.product.id,
                        quantity=line.quantity,
                        position=pos,
                        price_snapshot=line.product.price,
                    )
                )
            s.commit()
        log.debug("saved cart %s with %d lines", cart_uuid, len(lines))
