import os
import tempfile
from datetime import datetime, timedelta, timezone

# must be set before storefront.config is imported
_tmp = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ["MEDIA_DIR"] = os.path.join(_tmp, "media")
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ.pop("EMAILJS_SERVICE_ID", None)

import pytest
from fastapi.testclient import TestClient

from storefront.adapters.notifier import MockNotifier
from storefront.db import SessionLocal, init_db
from storefront.main import app
from storefront.services.cart_store import CartRegistry
from storefront.store.sql import SqlStore

ADMIN_HEADERS = {"X-Admin-Token": "test-admin-token"}

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

CATEGORIES = [
    {"id": "cat-belts", "name": "Belts", "slug": "belts"},
    {"id": "cat-wallets", "name": "Wallets", "slug": "wallets"},
    {"id": "cat-empty", "name": "Empty", "slug": "empty"},
]

PRODUCTS = [
    {
        "id": "p-belt",
        "name": "Black Leather Belt",
        "slug": "black-leather-belt",
        "description": "Full-grain leather",
        "price": 1200,
        "original_price": 1500,
        "stock_status": "in_stock",
        "featured": True,
        "popularity_score": 80,
        "created_at": BASE_TIME,
    },
    {
        "id": "p-gold",
        "name": "Gold Buckle Belt",
        "slug": "gold-buckle-belt",
        "description": "Tan leather, gold buckle",
        "price": 300,
        "stock_status": "low_stock",
        "featured": True,
        "popularity_score": 95,
        "created_at": BASE_TIME + timedelta(days=1),
    },
    {
        "id": "p-wallet",
        "name": "Brown Wallet",
        "slug": "brown-wallet",
        "description": None,
        "price": 500,
        "stock_status": "in_stock",
        "featured": False,
        "popularity_score": 50,
        "created_at": BASE_TIME + timedelta(days=2),
    },
    {
        "id": "p-gold-wallet",
        "name": "Gold Card Wallet",
        "slug": "gold-card-wallet",
        "description": "Metal card holder",
        "price": 100,
        "stock_status": "out_of_stock",
        "featured": False,
        "popularity_score": 10,
        "created_at": BASE_TIME + timedelta(days=3),
    },
]

LINKS = [
    {"product_id": "p-belt", "category_id": "cat-belts"},
    {"product_id": "p-gold", "category_id": "cat-belts"},
    {"product_id": "p-wallet", "category_id": "cat-wallets"},
    {"product_id": "p-gold-wallet", "category_id": "cat-wallets"},
]


def seed(store):
    store.insert("categories", [dict(c) for c in CATEGORIES])
    store.insert("products", [dict(p, images=[]) for p in PRODUCTS])
    store.insert("product_categories", [dict(l) for l in LINKS])


@pytest.fixture(scope="module")
def client():
    init_db(reset=True)
    db = SessionLocal()
    try:
        seed(SqlStore(db))
    finally:
        db.close()
    app.state.carts = CartRegistry(app.state.carts.persistence)
    app.state.notifier = MockNotifier()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def notifier(client):
    n = MockNotifier()
    app.state.notifier = n
    return n
