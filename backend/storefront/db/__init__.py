import importlib
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from storefront.config import settings

log = logging.getLogger("db")

DATABASE_URL = settings.DATABASE_URL

# sync endpoints run in a threadpool, sqlite connections must be shareable
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# model modules imported here so that Base.metadata knows every table
MODEL_MODULES = [
    "storefront.models.product",
    "storefront.models.category",
    "storefront.models.order",
    "storefront.models.review",
    "storefront.models.cart",
    "storefront.models.cart_item",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    With reset=True (or RESET_DB set in the environment) all tables are
    dropped and recreated, which is what the test-suite relies on.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset or settings.RESET_DB:
        log.info("Resetting database %s", DATABASE_URL)
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized.")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
