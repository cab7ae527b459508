from typing import Dict, Iterable, List, Optional, Set, Union

from storefront.repositories.category_repo import CategoryRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product_schema import ProductOut, SortOption
from storefront.services.exceptions import NotFoundError
from storefront.store.base import Store
from storefront.utils.dates import as_utc
from storefront.utils.fuzzy import fuzzy_match

# key, descending
_SORTS = {
    SortOption.NEWEST: (lambda p: as_utc(p.created_at), True),
    SortOption.PRICE_ASC: (lambda p: p.price, False),
    SortOption.PRICE_DESC: (lambda p: p.price, True),
    SortOption.POPULARITY: (lambda p: p.popularity_score, True),
}


def query_catalogue(
    products: Iterable[ProductOut],
    category_product_ids: Optional[Set[str]] = None,
    search: Optional[str] = None,
    sort: Union[SortOption, str] = SortOption.NEWEST,
) -> List[ProductOut]:
    """
    Filter and order a product collection for display.

    ``category_product_ids`` restricts to members of the selected category
    (None means no category selected). ``search`` keeps products whose name
    or description fuzzy-matches. The sort is stable, so ties keep their
    input order. The input collection is not modified.
    """
    sort = SortOption(sort)
    result = list(products)
    if category_product_ids is not None:
        result = [p for p in result if p.id in category_product_ids]
    if search:
        result = [
            p
            for p in result
            if fuzzy_match(search, p.name) or fuzzy_match(search, p.description)
        ]
    key, descending = _SORTS[sort]
    # sorted(reverse=True) keeps equal keys in input order
    return sorted(result, key=key, reverse=descending)


class CatalogueService:
    def __init__(self, store: Store):
        self.store = store
        self.products = ProductRepository(store)
        self.categories = CategoryRepository(store)
        self.reviews = ReviewRepository(store)

    def category_product_ids(self, category_slug: Optional[str]) -> Optional[Set[str]]:
        """slug -> category id -> product ids. Unknown slug selects nothing."""
        if not category_slug:
            return None
        category = self.categories.get_by_slug(category_slug)
        if not category:
            return set()
        return self.products.ids_for_category(category.id)

    def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: Union[SortOption, str] = SortOption.NEWEST,
    ) -> List[ProductOut]:
        ids = self.category_product_ids(category)
        if ids is not None and not ids:
            return []
        source = self.products.list_by_ids(ids) if ids is not None else self.products.list()
        return query_catalogue(source, ids, search, sort)

    def home(self) -> Dict:
        return {
            "featured": self.products.featured(limit=4),
            "categories": self.categories.list(),
        }

    def product_detail(self, slug: str) -> Dict:
        product = self.products.get_by_slug(slug)
        if not product:
            raise NotFoundError("Product not found")
        reviews = self.reviews.approved_for_product(product.id)
        average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0
        return {
            "product": product,
            "categories": self.products.categories_for(product.id),
            "reviews": reviews,
            "average_rating": round(average, 1),
            "review_count": len(reviews),
            "suggested": self.products.suggested(product.id, limit=4),
        }
