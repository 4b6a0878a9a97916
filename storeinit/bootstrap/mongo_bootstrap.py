from __future__ import annotations
from typing import Any, Dict
import logging

from ..mongo_client import drop_legacy_indexes, ensure_collections, ensure_indexes
from ..seed_data import seed_admin_user, seed_catalog

logger = logging.getLogger(__name__)

COUNTED_COLLECTIONS = ["users", "products", "orders", "addresses"]


def verify_database(db) -> Dict[str, Any]:
    """Log document counts and per-collection index counts. Read-only."""
    logger.info("Verifying data", extra={"stage": "verify"})
    counts = {}
    for name in COUNTED_COLLECTIONS:
        counts[name] = db[name].count_documents({})
        logger.info(
            f"{name.capitalize()} count: {counts[name]}",
            extra={"stage": "verify", "collection": name, "count": counts[name]},
        )

    index_counts = {}
    for name in db.list_collection_names():
        index_counts[name] = len(db[name].index_information())
        logger.info(
            f"Collection {name} has {index_counts[name]} indexes",
            extra={"stage": "verify", "collection": name, "indexes": index_counts[name]},
        )
    return {"counts": counts, "index_counts": index_counts}


def bootstrap_mongo(db, *, strict_indexes: bool = False) -> Dict[str, Any]:
    logger.info("Starting database initialization", extra={"stage": "bootstrap"})
    collections_created = ensure_collections(db)
    legacy = drop_legacy_indexes(db, strict=strict_indexes)
    indexes = ensure_indexes(db, strict=strict_indexes)

    logger.info("Setting up initial data", extra={"stage": "seed"})
    admin_created = seed_admin_user(db)
    products_inserted = seed_catalog(db)

    report = verify_database(db)
    return {
        "ok": True,
        "collections_created": collections_created,
        "legacy_indexes": legacy,
        "indexes": indexes,
        "admin_created": admin_created,
        "products_inserted": products_inserted,
        **report,
    }
