import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.adapters.image_storage import LocalImageStorage
from storefront.adapters.notifier import build_notifier
from storefront.api.health import router as health_router
from storefront.api.routes_admin import router as admin_router
from storefront.api.routes_cart import router as cart_router
from storefront.api.routes_catalogue import router as catalogue_router
from storefront.api.routes_order import router as order_router
from storefront.config import settings
from storefront.db import SessionLocal, init_db
from storefront.repositories.cart_repo import CartRepository
from storefront.services.admin_monitor import AdminNotificationMonitor
from storefront.services.cart_store import CartRegistry
from storefront.store.sql import SqlStore

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
log = logging.getLogger("storefront")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    init_db()

    scheduler = None
    if settings.ENABLE_SCHEDULER:
        scheduler = BackgroundScheduler()

        def refresh_admin_notifications():
            db = SessionLocal()
            try:
                app.state.admin_monitor.refresh(SqlStore(db))
            except Exception:
                log.warning("admin notification refresh failed", exc_info=True)
            finally:
                db.close()

        scheduler.add_job(
            refresh_admin_notifications,
            "interval",
            seconds=settings.ADMIN_POLL_SECONDS,
            id="admin_notifications",
        )
        scheduler.start()

    try:
        yield
    finally:
        if scheduler:
            scheduler.shutdown(wait=False)


app = FastAPI(title="Storefront - Backend", version="0.1.0", lifespan=lifespan)

# process-wide collaborators, owned by the app rather than module globals
app.state.carts = CartRegistry(CartRepository(), max_carts=settings.MAX_CARTS_IN_MEMORY)
app.state.notifier = build_notifier(settings)
app.state.image_storage = LocalImageStorage(settings.MEDIA_DIR, settings.MEDIA_URL)
app.state.admin_monitor = AdminNotificationMonitor()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(catalogue_router, prefix="/api", tags=["catalogue"])

app.include_router(cart_router, tags=["cart"])

app.include_router(order_router, prefix="/api", tags=["orders"])

app.include_router(admin_router, tags=["admin"])

app.mount(
    settings.MEDIA_URL,
    StaticFiles(directory=settings.MEDIA_DIR, check_dir=False),
    name="media",
)
