from fastapi import APIRouter, Request
from sqlalchemy import text

from storefront.db import engine

router = APIRouter()


@router.get("/health", tags=["health"])
def health(request: Request):
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except Exception:
        db_ok = False
    notifier_ok = request.app.state.notifier.health_check()
    storage_ok = request.app.state.image_storage.health_check()

    # email is best-effort, so it does not degrade the status
    return {
        "status": "ok" if db_ok and storage_ok else "degraded",
        "db": db_ok,
        "notifier": notifier_ok,
        "image_storage": storage_ok,
    }
