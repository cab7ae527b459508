from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status

from storefront.api.deps import get_cart, get_notifier, get_store
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import (
    CheckoutError,
    CheckoutService,
    CheckoutValidationError,
)
from storefront.services.exceptions import NotFoundError
from storefront.store.base import Store

router = APIRouter(tags=["orders"])


@router.post(
    "/checkout",
    summary="Place a cash-on-delivery order from the cart",
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: Dict[str, Any] = Body(...),
    cart: CartStore = Depends(get_cart),
    store: Store = Depends(get_store),
    notifier=Depends(get_notifier),
):
    svc = CheckoutService(store, notifier)
    try:
        return svc.place_order(cart, payload)
    except CheckoutValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except CheckoutError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/orders/{order_number}", summary="Look up an order by number")
def get_order(order_number: str, store: Store = Depends(get_store)):
    try:
        return CheckoutService(store, notifier=None).get_order(order_number)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
