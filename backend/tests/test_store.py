import pytest

from conftest import seed
from storefront.db import SessionLocal, init_db
from storefront.store.base import StoreError
from storefront.store.memory import MemoryStore
from storefront.store.sql import SqlStore


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        s = MemoryStore()
        seed(s)
        yield s
        return
    init_db(reset=True)
    db = SessionLocal()
    try:
        s = SqlStore(db)
        seed(s)
        yield s
    finally:
        db.close()


def ids(rows):
    return [r["id"] for r in rows]


def test_select_filters(store):
    assert ids(store.select("products", where={"featured": True}, order_by="name")) == [
        "p-belt",
        "p-gold",
    ]
    assert set(ids(store.select("products", where_in={"id": ["p-wallet", "p-gold", "x"]}))) == {
        "p-wallet",
        "p-gold",
    }
    assert "p-belt" not in ids(store.select("products", where_not={"id": "p-belt"}))
    assert store.select("products", where_in={"id": []}) == []


def test_select_order_and_limit(store):
    rows = store.select("products", order_by="price", descending=True, limit=2)
    assert ids(rows) == ["p-belt", "p-wallet"]
    assert ids(store.select("products", order_by="popularity_score")) == [
        "p-gold-wallet",
        "p-wallet",
        "p-belt",
        "p-gold",
    ]


def test_get(store):
    assert store.get("categories", slug="wallets")["id"] == "cat-wallets"
    assert store.get("categories", slug="nope") is None


def test_insert_assigns_id(store):
    row = store.insert("categories", [{"name": "Bags", "slug": "bags"}])[0]
    assert row["id"]
    assert row["created_at"] is not None
    assert store.get("categories", id=row["id"])["name"] == "Bags"


def test_update(store):
    row = store.update("products", "p-wallet", {"price": 550})
    assert row["price"] == 550
    assert store.get("products", id="p-wallet")["price"] == 550
    assert store.update("products", "missing", {"price": 1}) is None


def test_delete(store):
    assert store.delete("product_categories", where={"category_id": "cat-belts"}) == 2
    assert store.select("product_categories", where={"category_id": "cat-belts"}) == []
    assert store.delete("categories", row_id="cat-empty") == 1
    assert store.delete("categories", row_id="cat-empty") == 0
    with pytest.raises(StoreError):
        store.delete("categories")


def test_unknown_collection(store):
    with pytest.raises(StoreError):
        store.select("carts")


def test_transaction_commits(store):
    with store.transaction():
        store.insert("categories", [{"name": "Bags", "slug": "bags"}])
        store.update("products", "p-gold", {"featured": False})
    assert store.get("categories", slug="bags") is not None
    assert store.get("products", id="p-gold")["featured"] is False


def test_transaction_rolls_back(store):
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.insert("categories", [{"name": "Bags", "slug": "bags"}])
            store.delete("products", row_id="p-belt")
            raise RuntimeError("boom")
    assert store.get("categories", slug="bags") is None
    assert store.get("products", id="p-belt") is not None


def test_nested_transaction_rolls_back_inner_only(store):
    with store.transaction():
        store.insert("categories", [{"name": "Bags", "slug": "bags"}])
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.insert("categories", [{"name": "Hats", "slug": "hats"}])
                raise RuntimeError("inner")
    assert store.get("categories", slug="bags") is not None
    assert store.get("categories", slug="hats") is None


def test_memory_store_simulated_failure():
    store = MemoryStore(fail_on={"orders"})
    with pytest.raises(StoreError):
        store.insert("orders", [{"order_number": "ORD-1"}])
    assert store.select("orders") == []
    assert store.write_log == []


def test_health_check(store):
    assert store.health_check() is True
