#!/usr/bin/env python3
"""
Seed categories and products from a JSON file (scripts/data/catalogue.json
by default). Existing slugs are skipped, so the script can be re-run.

Usage:
    python scripts/seed_catalogue.py --file scripts/data/catalogue.json
"""
import argparse
import json
import logging
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.adapters.notifier import MockNotifier
from storefront.db import SessionLocal, init_db
from storefront.schemas.product_schema import CategoryIn, ProductIn
from storefront.services.admin_service import AdminService
from storefront.store.sql import SqlStore
from storefront.utils.slug import make_slug

log = logging.getLogger("seed")

DEFAULT_SOURCE = os.path.join(os.path.dirname(__file__), "data", "catalogue.json")


def seed(data: dict, svc: AdminService) -> tuple:
    """Create the categories, then the products linked to them by slug."""
    by_slug = {c.slug: c.id for c in svc.list_categories()}
    created_categories = 0
    for entry in data.get("categories", []):
        slug = make_slug(entry["name"])
        if slug in by_slug:
            continue
        c = svc.create_category(CategoryIn(**entry))
        by_slug[c.slug] = c.id
        created_categories += 1

    existing = {p.slug for p in svc.list_products()}
    created_products = 0
    for entry in data.get("products", []):
        entry = dict(entry)
        category_slugs = entry.pop("categories", [])
        if make_slug(entry["name"]) in existing:
            continue
        entry["category_ids"] = [by_slug[s] for s in category_slugs if s in by_slug]
        svc.create_product(ProductIn(**entry))
        created_products += 1
    return created_categories, created_products


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=DEFAULT_SOURCE, help="Path to catalogue json")
    args = parser.parse_args()
    if not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)

    with open(args.file, "r", encoding="utf-8") as f:
        data = json.load(f)

    init_db()
    db = SessionLocal()
    try:
        cats, prods = seed(data, AdminService(SqlStore(db), MockNotifier()))
        log.info("Seeded %d categories and %d products", cats, prods)
    finally:
        db.close()
