from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import logging

from .schemas.types import Product, User, UserRole
from .utils.time import utc_now

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@store.com"
# bcrypt hash of the bootstrap admin password; rotate it after first login
ADMIN_PASSWORD_HASH = "$2a$10$8.UnVuG9HHgffUDAlk8qfOuVGkqRzgVymGe07xd00DMxs.AQubh4a"

# name, description, price, stock, category, images, rating, reviews
SAMPLE_PRODUCTS = [
    (
        "Smartphone",
        "Latest smartphone with advanced features",
        "699.99",
        50,
        "Electronics",
        ["phone1.jpg", "phone2.jpg"],
        "4.5",
        120,
    ),
    (
        "Laptop",
        "High-performance laptop for work and gaming",
        "1299.99",
        25,
        "Electronics",
        ["laptop1.jpg", "laptop2.jpg"],
        "4.8",
        85,
    ),
    (
        "Programming Book",
        "Comprehensive guide to programming",
        "39.99",
        100,
        "Books",
        ["book1.jpg"],
        "4.2",
        45,
    ),
    (
        "Wireless Headphones",
        "Noise-cancelling wireless headphones",
        "199.99",
        75,
        "Electronics",
        ["headphones1.jpg"],
        "4.6",
        200,
    ),
    (
        "T-Shirt",
        "Cotton t-shirt in various colors",
        "19.99",
        150,
        "Clothing",
        ["tshirt1.jpg"],
        "4.3",
        89,
    ),
]


def admin_user(now: Optional[datetime] = None) -> User:
    now = now or utc_now()
    return User(
        email=ADMIN_EMAIL,
        password=ADMIN_PASSWORD_HASH,
        first_name="Admin",
        last_name="User",
        roles=[UserRole.ROLE_ADMIN, UserRole.ROLE_USER],
        address_ids=[],
        enabled=True,
        created_at=now,
        updated_at=now,
    )


def sample_products(now: Optional[datetime] = None) -> List[Product]:
    now = now or utc_now()
    return [
        Product(
            name=name,
            description=description,
            price=Decimal(price),
            stock_quantity=stock,
            category=category,
            images=list(images),
            rating=Decimal(rating),
            review_count=reviews,
            active=True,
            created_at=now,
            updated_at=now,
        )
        for name, description, price, stock, category, images, rating, reviews in SAMPLE_PRODUCTS
    ]


def seed_admin_user(db, now: Optional[datetime] = None) -> bool:
    """Insert the admin account unless a user with its email exists.

    Returns True when the record was inserted. Lookup and insert errors are
    left to the caller.
    """
    users = db["users"]
    if users.find_one({"email": ADMIN_EMAIL}) is not None:
        logger.info("Admin user already exists", extra={"stage": "seed", "collection": "users"})
        return False
    users.insert_one(admin_user(now).to_document())
    logger.info("Created admin user", extra={"stage": "seed", "collection": "users"})
    return True


def seed_catalog(db, now: Optional[datetime] = None) -> int:
    """Insert the sample products into an empty catalog; return how many went in."""
    products = db["products"]
    existing = products.count_documents({})
    if existing:
        logger.info(
            "Products already exist in database",
            extra={"stage": "seed", "collection": "products", "existing": existing},
        )
        return 0
    docs = [p.to_document() for p in sample_products(now)]
    products.insert_many(docs)
    logger.info(
        "Inserted sample products",
        extra={"stage": "seed", "collection": "products", "inserted": len(docs)},
    )
    return len(docs)
