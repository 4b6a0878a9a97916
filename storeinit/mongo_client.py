from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple
import logging

from pymongo import MongoClient, ASCENDING, DESCENDING, TEXT
from pymongo.errors import PyMongoError

from .config_loader import Settings

logger = logging.getLogger(__name__)

COLLECTIONS = ["users", "products", "orders", "addresses", "carts"]


def get_client(s: Settings) -> MongoClient:
    return MongoClient(
        s.mongo.uri, serverSelectionTimeoutMS=s.mongo.server_selection_timeout_ms
    )


def get_db(s: Settings, client: MongoClient | None = None):
    return (client if client is not None else get_client(s))[s.mongo.db]


class IndexOutcome(str, Enum):
    CREATED = "created"
    EXISTS = "exists"
    DROPPED = "dropped"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True)
class IndexSpec:
    collection: str
    name: str
    keys: List[Tuple[str, Any]]
    options: Dict[str, Any] = field(default_factory=dict)
    label: str = ""


# Indexes from earlier schema versions that conflict with the current set
LEGACY_INDEXES: List[Tuple[str, str, str]] = [
    ("products", "name_text_description_text", "old text index"),
    ("products", "name_1_description_1", "old compound index"),
]

INDEX_SPECS: List[IndexSpec] = [
    # users: email doubles as the login name
    IndexSpec("users", "email_unique", [("email", ASCENDING)], {"unique": True}, "users email"),
    # products: weighted search, name hits outrank description hits
    IndexSpec(
        "products",
        "product_text_search",
        [("name", TEXT), ("description", TEXT)],
        {"weights": {"name": 10, "description": 5}},
        "products text search",
    ),
    IndexSpec("products", "category_index", [("category", ASCENDING)], label="products category"),
    IndexSpec("products", "price_index", [("price", ASCENDING)], label="products price"),
    IndexSpec("products", "active_index", [("active", ASCENDING)], label="products active status"),
    # orders
    IndexSpec("orders", "user_orders_index", [("userId", ASCENDING)], label="orders user"),
    IndexSpec("orders", "order_status_index", [("status", ASCENDING)], label="orders status"),
    IndexSpec("orders", "order_date_index", [("createdAt", DESCENDING)], label="orders date"),
    # addresses
    IndexSpec("addresses", "user_addresses_index", [("userId", ASCENDING)], label="addresses user"),
]


def _error_extra(exc: PyMongoError) -> Dict[str, Any]:
    return {"error": str(exc), "code": getattr(exc, "code", None)}


def ensure_collections(db, names: Sequence[str] = COLLECTIONS) -> List[str]:
    """Create every collection in ``names`` that the database does not have yet.

    Failures are not caught: a database we cannot create collections in is not
    worth indexing or seeding.
    """
    created: List[str] = []
    for name in names:
        if name in db.list_collection_names():
            logger.info(
                f"Collection already exists: {name}",
                extra={"stage": "collections", "collection": name},
            )
            continue
        db.create_collection(name)
        created.append(name)
        logger.info(
            f"Created collection: {name}",
            extra={"stage": "collections", "collection": name},
        )
    return created


def drop_index_if_present(
    db, collection: str, name: str, *, label: str = "", strict: bool = False
) -> IndexOutcome:
    label = label or name
    coll = db[collection]
    try:
        if name not in coll.index_information():
            logger.info(
                f"{label} not present, nothing to drop",
                extra={"stage": "indexes.cleanup", "collection": collection, "index": name},
            )
            return IndexOutcome.MISSING
        coll.drop_index(name)
    except PyMongoError as exc:
        if strict:
            raise
        logger.warning(
            f"{label} could not be dropped",
            extra={
                "stage": "indexes.cleanup",
                "collection": collection,
                "index": name,
                **_error_extra(exc),
            },
        )
        return IndexOutcome.FAILED
    logger.info(
        f"Dropped {label}",
        extra={"stage": "indexes.cleanup", "collection": collection, "index": name},
    )
    return IndexOutcome.DROPPED


def drop_legacy_indexes(db, *, strict: bool = False) -> Dict[str, IndexOutcome]:
    logger.info("Cleaning up existing indexes", extra={"stage": "indexes.cleanup"})
    return {
        name: drop_index_if_present(db, collection, name, label=label, strict=strict)
        for collection, name, label in LEGACY_INDEXES
    }


def ensure_index(db, spec: IndexSpec, *, strict: bool = False) -> IndexOutcome:
    label = spec.label or spec.name
    extra = {"stage": "indexes", "collection": spec.collection, "index": spec.name}
    coll = db[spec.collection]
    try:
        if spec.name in coll.index_information():
            logger.info(f"{label} index already exists", extra=extra)
            return IndexOutcome.EXISTS
        coll.create_index(spec.keys, name=spec.name, **spec.options)
    except PyMongoError as exc:
        if strict:
            raise
        logger.warning(
            f"{label} index could not be created", extra={**extra, **_error_extra(exc)}
        )
        return IndexOutcome.FAILED
    logger.info(f"Created {label} index", extra=extra)
    return IndexOutcome.CREATED


def ensure_indexes(
    db, specs: Sequence[IndexSpec] = INDEX_SPECS, *, strict: bool = False
) -> Dict[str, IndexOutcome]:
    # each index stands alone; one failure does not stop the rest
    logger.info("Creating indexes", extra={"stage": "indexes"})
    return {spec.name: ensure_index(db, spec, strict=strict) for spec in specs}
