import os
import uuid

import pytest
from pymongo import MongoClient

from storeinit.bootstrap.mongo_bootstrap import bootstrap_mongo
from storeinit.catalog_search import search_products

MONGO_URI = os.getenv("STOREINIT_TEST_MONGODB_URI")

pytestmark = pytest.mark.skipif(
    not MONGO_URI, reason="STOREINIT_TEST_MONGODB_URI not set; $text needs a real server"
)


@pytest.fixture
def db():
    client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=3000)
    name = f"storeinit-test-{uuid.uuid4().hex[:8]}"
    try:
        yield client[name]
    finally:
        client.drop_database(name)
        client.close()


def test_name_matches_outrank_description_matches(db):
    bootstrap_mongo(db)
    db["products"].insert_many(
        [
            {"name": "Desk Lamp", "description": "Pairs well with any laptop", "active": True},
            {"name": "Laptop Stand", "description": "Aluminium riser", "active": True},
        ]
    )

    results = search_products(db, "laptop")
    names = [r["name"] for r in results]

    assert names.index("Laptop Stand") < names.index("Desk Lamp")
    assert names.index("Laptop") < names.index("Desk Lamp")
    assert all("score" in r for r in results)


def test_inactive_products_are_hidden_by_default(db):
    bootstrap_mongo(db)
    db["products"].update_one({"name": "T-Shirt"}, {"$set": {"active": False}})

    assert search_products(db, "cotton") == []
    assert [r["name"] for r in search_products(db, "cotton", active_only=False)] == ["T-Shirt"]


def test_bootstrap_twice_against_real_server(db):
    bootstrap_mongo(db)
    second = bootstrap_mongo(db)
    assert second["counts"] == {"users": 1, "products": 5, "orders": 0, "addresses": 0}
    assert second["index_counts"]["products"] == 5
