import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.db import get_db
from storefront.repositories.product_repo import ProductRepository
from storefront.services.cart_store import CartStore
from storefront.store.base import Store
from storefront.store.sql import SqlStore

CART_COOKIE = "cart_uuid"


def get_store(db: Session = Depends(get_db)) -> Store:
    return SqlStore(db)


def get_notifier(request: Request):
    return request.app.state.notifier


def get_cart(request: Request, store: Store = Depends(get_store)) -> CartStore:
    registry = request.app.state.carts
    products = ProductRepository(store)
    return registry.get(request.cookies.get(CART_COOKIE), products.list_by_ids)


def require_admin(x_admin_token: Optional[str] = Header(None)):
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.ADMIN_TOKEN):
        raise HTTPException(status_code=401, detail="Admin session required")
