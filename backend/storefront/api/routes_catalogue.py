from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.deps import get_store
from storefront.schemas.product_schema import SortOption
from storefront.schemas.review_schema import ReviewIn
from storefront.services.catalogue_service import CatalogueService
from storefront.services.exceptions import NotFoundError
from storefront.services.review_service import ReviewService
from storefront.store.base import Store, StoreError

router = APIRouter(tags=["catalogue"])


@router.get("/home", summary="Featured products and categories")
def home(store: Store = Depends(get_store)):
    return CatalogueService(store).home()


@router.get("/categories", summary="List categories")
def list_categories(store: Store = Depends(get_store)):
    return CatalogueService(store).categories.list()


@router.get("/products", summary="List products")
def list_products(
    category: Optional[str] = Query(None, description="category slug"),
    search: Optional[str] = Query(None, description="fuzzy search term"),
    sort: SortOption = Query(SortOption.NEWEST),
    store: Store = Depends(get_store),
):
    try:
        items = CatalogueService(store).list_products(category, search, sort)
    except StoreError:
        raise HTTPException(status_code=503, detail="Could not load products. Please try again.")
    return {"items": items, "total": len(items)}


@router.get("/products/{slug}", summary="Get product by slug")
def get_product(slug: str, store: Store = Depends(get_store)):
    try:
        return CatalogueService(store).product_detail(slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/products/{slug}/reviews",
    summary="Submit a review (shown after approval)",
    status_code=status.HTTP_201_CREATED,
)
def submit_review(slug: str, payload: ReviewIn, store: Store = Depends(get_store)):
    try:
        review = ReviewService(store).submit_review(slug, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError:
        raise HTTPException(status_code=503, detail="Failed to submit review. Please try again.")
    return {"id": review.id, "approved": review.approved}
