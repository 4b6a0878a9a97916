from __future__ import annotations
from pathlib import Path
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field
import yaml

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


class MongoConfig(BaseModel):
    uri: str = Field(default="mongodb://localhost:27017")
    db: str = Field(default="internet-store")
    server_selection_timeout_ms: int = Field(default=5000)


class IndexConfig(BaseModel):
    # Re-raise index drop/create failures instead of logging and moving on
    strict: bool = Field(default=False)


class Settings(BaseModel):
    mongo: MongoConfig = Field(default_factory=MongoConfig)
    indexes: IndexConfig = Field(default_factory=IndexConfig)


def _load_yaml(path: str | os.PathLike) -> dict:
    p = Path(path)
    if not p.exists():
        logger.info(
            f"Config file {p} does not exist, using defaults and environment",
            extra={"stage": "config"},
        )
        return {}
    with p.open("r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {p} must contain a mapping at the top level")
    return loaded


def _section(data: dict, key: str) -> dict:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{key}' must be a mapping")
    return section


def _env_flag(name: str, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_settings(config_path: str = "config.yaml") -> Settings:
    load_dotenv(override=False)

    data = _load_yaml(config_path)
    mongo = _section(data, "mongo")
    indexes = _section(data, "indexes")

    # Allow env overrides for deployment-specific values
    env_overrides = {
        "mongo": {
            "uri": os.getenv("MONGODB_URI", mongo.get("uri", "mongodb://localhost:27017")),
            "db": os.getenv("MONGODB_DB", mongo.get("db", "internet-store")),
        },
        "indexes": {
            "strict": _env_flag("STOREINIT_STRICT_INDEXES", indexes.get("strict", False)),
        },
    }

    # Merge shallowly
    merged = {
        **data,
        "mongo": {**mongo, **env_overrides["mongo"]},
        "indexes": {**indexes, **env_overrides["indexes"]},
    }
    return Settings(**merged)
