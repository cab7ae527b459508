from datetime import datetime, timedelta, timezone

import pytest

from storefront.schemas.product_schema import ProductOut, SortOption
from storefront.services.catalogue_service import CatalogueService, query_catalogue
from storefront.store.memory import MemoryStore
from storefront.utils.fuzzy import fuzzy_match

from conftest import seed

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


def product(pid, price=100, name=None, description=None, popularity=0, age_days=0):
    return ProductOut(
        id=pid,
        name=name or pid,
        slug=pid,
        price=price,
        description=description,
        popularity_score=popularity,
        created_at=T0 - timedelta(days=age_days),
    )


@pytest.mark.parametrize(
    "query,target,expected",
    [
        ("blk", "Black Leather Belt", True),
        ("blk wlt", "black wallet", True),
        ("BLK", "black leather belt", True),
        ("blk", "Brown Wallet", False),
        ("", "anything", True),
        ("", None, True),
        ("a", None, False),
        ("a", "", False),
        ("tleb", "belt", False),
    ],
)
def test_fuzzy_match(query, target, expected):
    assert fuzzy_match(query, target) is expected


def test_sort_price_asc():
    items = [product("a", 300), product("b", 100), product("c", 200)]
    result = query_catalogue(items, sort=SortOption.PRICE_ASC)
    assert [p.price for p in result] == [100, 200, 300]


def test_sorts_are_stable():
    items = [product("x", 200), product("first", 100), product("second", 100)]
    assert [p.id for p in query_catalogue(items, sort="price_asc")] == ["first", "second", "x"]
    assert [p.id for p in query_catalogue(items, sort="price_desc")] == ["x", "first", "second"]


def test_sort_newest_is_default_and_popularity_desc():
    items = [
        product("old", age_days=10, popularity=5),
        product("new", age_days=0, popularity=1),
        product("mid", age_days=3, popularity=9),
    ]
    assert [p.id for p in query_catalogue(items)] == ["new", "mid", "old"]
    assert [p.id for p in query_catalogue(items, sort="popularity")] == ["mid", "old", "new"]


def test_unknown_sort_is_rejected():
    with pytest.raises(ValueError):
        query_catalogue([product("a")], sort="cheapest")


def test_search_matches_name_or_description():
    items = [
        product("a", name="Plain Belt", description="solid gold finish"),
        product("b", name="Gold Ring"),
        product("c", name="Brown Wallet"),
    ]
    result = query_catalogue(items, search="gold")
    assert {p.id for p in result} == {"a", "b"}


def test_empty_inputs():
    assert query_catalogue([]) == []
    assert query_catalogue([product("a", name="belt")], search="zzz") == []
    assert query_catalogue([product("a")], category_product_ids=set()) == []


def test_source_is_not_mutated():
    items = [product("a", 300), product("b", 100)]
    query_catalogue(items, search="b", sort="price_asc")
    assert [p.id for p in items] == ["a", "b"]


def test_category_and_search_commute():
    items = [
        product("belt-gold", name="Gold Belt"),
        product("belt-black", name="Black Belt"),
        product("ring-gold", name="Gold Ring"),
    ]
    belts = {"belt-gold", "belt-black"}
    combined = query_catalogue(items, category_product_ids=belts, search="gold")
    search_first = query_catalogue(
        query_catalogue(items, search="gold"), category_product_ids=belts
    )
    category_first = query_catalogue(
        query_catalogue(items, category_product_ids=belts), search="gold"
    )
    assert {p.id for p in combined} == {p.id for p in search_first} == {p.id for p in category_first}
    assert [p.id for p in combined] == ["belt-gold"]


def test_discount_percent():
    p = ProductOut(id="a", name="a", slug="a", price=1200, original_price=1500)
    assert p.discount_percent == 20
    assert ProductOut(id="b", name="b", slug="b", price=10).discount_percent is None
    assert ProductOut(id="c", name="c", slug="c", price=10, original_price=5).discount_percent is None


# --- service over the in-memory store ---


@pytest.fixture
def service():
    store = MemoryStore()
    seed(store)
    return CatalogueService(store)


def test_service_category_lookup(service):
    result = service.list_products(category="belts", sort="price_asc")
    assert [p.id for p in result] == ["p-gold", "p-belt"]
    assert service.list_products(category="empty") == []
    assert service.list_products(category="no-such-category") == []


def test_service_category_with_search(service):
    result = service.list_products(category="belts", search="gold")
    assert [p.id for p in result] == ["p-gold"]


def test_service_home(service):
    home = service.home()
    assert [p.id for p in home["featured"]] == ["p-gold", "p-belt"]
    assert [c.slug for c in home["categories"]] == ["belts", "empty", "wallets"]


def test_service_detail_averages_approved_reviews_only(service):
    store = service.store
    store.insert(
        "reviews",
        [
            {"product_id": "p-belt", "customer_name": "A", "customer_email": "a@x.io", "rating": 5, "approved": True},
            {"product_id": "p-belt", "customer_name": "B", "customer_email": "b@x.io", "rating": 4, "approved": True},
            {"product_id": "p-belt", "customer_name": "C", "customer_email": "c@x.io", "rating": 1, "approved": False},
        ],
    )
    detail = service.product_detail("black-leather-belt")
    assert detail["review_count"] == 2
    assert detail["average_rating"] == 4.5
    assert "p-belt" not in {p.id for p in detail["suggested"]}
    assert len(detail["suggested"]) <= 4
    assert [c.slug for c in detail["categories"]] == ["belts"]


# --- HTTP ---


def test_list_products(client):
    res = client.get("/api/products")
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 4
    # newest first
    assert [p["id"] for p in body["items"]] == ["p-gold-wallet", "p-wallet", "p-gold", "p-belt"]


def test_list_products_with_filters(client):
    res = client.get("/api/products", params={"category": "wallets", "search": "gold", "sort": "price_asc"})
    assert [p["id"] for p in res.json()["items"]] == ["p-gold-wallet"]
    res = client.get("/api/products", params={"sort": "price_desc"})
    assert [p["price"] for p in res.json()["items"]] == [1200, 500, 300, 100]


def test_list_products_bad_sort(client):
    assert client.get("/api/products", params={"sort": "bogus"}).status_code == 422


def test_product_detail_and_not_found(client):
    res = client.get("/api/products/black-leather-belt")
    assert res.status_code == 200
    body = res.json()
    assert body["product"]["discount_percent"] == 20
    assert body["product"]["purchasable"] is True
    assert client.get("/api/products/no-such-thing").status_code == 404


def test_home_and_categories(client):
    body = client.get("/api/home").json()
    assert [p["id"] for p in body["featured"]] == ["p-gold", "p-belt"]
    cats = client.get("/api/categories").json()
    assert [c["name"] for c in cats] == ["Belts", "Empty", "Wallets"]


def test_submit_review_is_hidden_until_approved(client):
    res = client.post(
        "/api/products/brown-wallet/reviews",
        json={"customer_name": "Asha", "customer_email": "asha@example.com", "rating": 4, "comment": "Nice"},
    )
    assert res.status_code == 201
    assert res.json()["approved"] is False
    detail = client.get("/api/products/brown-wallet").json()
    assert detail["reviews"] == []


def test_submit_review_validation(client):
    res = client.post(
        "/api/products/brown-wallet/reviews",
        json={"customer_name": "Asha", "customer_email": "asha@example.com", "rating": 7},
    )
    assert res.status_code == 422
    res = client.post(
        "/api/products/missing/reviews",
        json={"customer_name": "Asha", "customer_email": "asha@example.com", "rating": 3},
    )
    assert res.status_code == 404
