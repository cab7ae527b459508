from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from pydantic import BaseModel

from storefront.api.deps import get_notifier, get_store, require_admin
from storefront.adapters.image_storage import ImageStorageError
from storefront.schemas.order_schema import OrderStatusIn
from storefront.schemas.product_schema import CategoryIn, ProductIn
from storefront.services.admin_service import AdminService, AdminServiceException
from storefront.services.exceptions import NotFoundError
from storefront.store.base import Store, StoreError

router = APIRouter(
    prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


class CategoryIdsIn(BaseModel):
    category_ids: List[str]


class ApprovalIn(BaseModel):
    approved: bool


def _svc(store: Store = Depends(get_store), notifier=Depends(get_notifier)) -> AdminService:
    return AdminService(store, notifier)


def _run(fn, *args):
    """Call a service method, mapping its errors onto HTTP responses."""
    try:
        return fn(*args)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AdminServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError:
        raise HTTPException(status_code=503, detail="Storage unavailable, please retry")


@router.get("/stats", summary="Dashboard numbers")
def stats(svc: AdminService = Depends(_svc)):
    return _run(svc.get_stats)


@router.get("/orders", summary="All orders with items, newest first")
def list_orders(svc: AdminService = Depends(_svc)):
    return _run(svc.get_orders)


@router.patch("/orders/{order_id}/status", summary="Change order status and notify customer")
def update_order_status(order_id: str, payload: OrderStatusIn, svc: AdminService = Depends(_svc)):
    return _run(svc.update_order_status, order_id, payload.status)


@router.get("/products", summary="All products with categories")
def list_products(svc: AdminService = Depends(_svc)):
    return _run(svc.list_products)


@router.post("/products", status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductIn, svc: AdminService = Depends(_svc)):
    return _run(svc.create_product, payload)


@router.put("/products/{product_id}")
def update_product(product_id: str, payload: ProductIn, svc: AdminService = Depends(_svc)):
    return _run(svc.update_product, product_id, payload)


@router.delete("/products/{product_id}")
def delete_product(product_id: str, svc: AdminService = Depends(_svc)):
    _run(svc.delete_product, product_id)
    return {"ok": True}


@router.put("/products/{product_id}/categories", summary="Replace product categories")
def set_product_categories(
    product_id: str, payload: CategoryIdsIn, svc: AdminService = Depends(_svc)
):
    _run(svc.set_product_categories, product_id, payload.category_ids)
    return {"ok": True}


@router.get("/categories")
def list_categories(svc: AdminService = Depends(_svc)):
    return _run(svc.list_categories)


@router.post("/categories", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryIn, svc: AdminService = Depends(_svc)):
    return _run(svc.create_category, payload)


@router.put("/categories/{category_id}")
def update_category(category_id: str, payload: CategoryIn, svc: AdminService = Depends(_svc)):
    return _run(svc.update_category, category_id, payload)


@router.delete("/categories/{category_id}")
def delete_category(category_id: str, svc: AdminService = Depends(_svc)):
    _run(svc.delete_category, category_id)
    return {"ok": True}


@router.get("/reviews", summary="All reviews with product names")
def list_reviews(svc: AdminService = Depends(_svc)):
    return _run(svc.list_reviews)


@router.patch("/reviews/{review_id}", summary="Approve or hide a review")
def set_review_approval(review_id: str, payload: ApprovalIn, svc: AdminService = Depends(_svc)):
    return _run(svc.set_review_approval, review_id, payload.approved)


@router.post("/uploads", summary="Upload a product image", status_code=status.HTTP_201_CREATED)
async def upload_image(request: Request, image: UploadFile = File(...)):
    data = await image.read()
    try:
        url = request.app.state.image_storage.save(image.filename, data)
    except ImageStorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"image_url": url}


@router.get("/notifications", summary="New and pending order counts")
def notifications(request: Request, store: Store = Depends(get_store)):
    return _run(request.app.state.admin_monitor.refresh, store)


@router.post("/notifications/checked", summary="Reset the new-order counter")
def mark_checked(request: Request):
    return request.app.state.admin_monitor.mark_checked()
