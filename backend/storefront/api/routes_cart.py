from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.deps import CART_COOKIE, get_cart, get_store
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart_schema import AddItemIn, UpdateQuantityIn
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import quote
from storefront.store.base import Store

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _cart_body(cart: CartStore, response: Response):
    # (re)issue the cookie so a freshly created cart sticks
    response.set_cookie(CART_COOKIE, cart.cart_id, httponly=False, samesite="Lax")
    return {
        "cart_uuid": cart.cart_id,
        "items": [
            {"product": it.product, "quantity": it.quantity, "line_total": it.line_total}
            for it in cart.items
        ],
        "total_items": cart.total_items,
        "total_price": cart.total_price,
        **quote(cart),
    }


@router.get("", summary="Get cart")
def get_cart_view(response: Response, cart: CartStore = Depends(get_cart)):
    return _cart_body(cart, response)


@router.post("/items", summary="Add item to cart")
def add_item(
    payload: AddItemIn,
    response: Response,
    cart: CartStore = Depends(get_cart),
    store: Store = Depends(get_store),
):
    if payload.quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be positive")
    product = ProductRepository(store).get_by_id(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if not product.purchasable:
        raise HTTPException(status_code=409, detail="Product is out of stock")
    cart.add_item(product, payload.quantity)
    return _cart_body(cart, response)


@router.patch("/items/{product_id}", summary="Set item quantity (0 removes)")
def update_item(
    product_id: str,
    payload: UpdateQuantityIn,
    response: Response,
    cart: CartStore = Depends(get_cart),
):
    cart.update_quantity(product_id, payload.quantity)
    return _cart_body(cart, response)


@router.delete("/items/{product_id}", summary="Remove item")
def remove_item(product_id: str, response: Response, cart: CartStore = Depends(get_cart)):
    cart.remove_item(product_id)
    return _cart_body(cart, response)


@router.delete("", summary="Clear cart")
def clear_cart(response: Response, cart: CartStore = Depends(get_cart)):
    cart.clear_cart()
    return _cart_body(cart, response)
