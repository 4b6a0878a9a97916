from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from bson.decimal128 import Decimal128
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    ROLE_USER = "ROLE_USER"
    ROLE_ADMIN = "ROLE_ADMIN"


class StoreDocument(BaseModel):
    """Base for records written straight to MongoDB.

    Fields are declared snake_case and stored camelCase, matching the field
    names the store application reads. ``Decimal`` values are stored as
    ``Decimal128`` so prices keep exact cents.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )

    def to_document(self) -> dict:
        doc = self.model_dump(by_alias=True)
        return {k: Decimal128(v) if isinstance(v, Decimal) else v for k, v in doc.items()}


class User(StoreDocument):
    email: str
    password: str  # bcrypt hash, never plain text
    first_name: str
    last_name: str
    roles: List[UserRole] = Field(default_factory=lambda: [UserRole.ROLE_USER.value])
    address_ids: List[str] = Field(default_factory=list)
    enabled: bool = True
    created_at: datetime
    updated_at: datetime


class Product(StoreDocument):
    name: str
    description: str
    price: Decimal
    stock_quantity: int
    category: str
    images: List[str] = Field(default_factory=list)
    rating: Decimal
    review_count: int = 0
    active: bool = True
    created_at: datetime
    updated_at: datetime
