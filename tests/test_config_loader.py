from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storeinit.config_loader import load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("MONGODB_URI", "MONGODB_DB", "STOREINIT_STRICT_INDEXES"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.setattr("storeinit.config_loader.load_dotenv", lambda **kw: False)


def _write_config(tmp_path, body: str) -> str:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(textwrap.dedent(body), encoding="utf-8")
    return str(cfg)


def test_missing_file_uses_defaults(tmp_path):
    s = load_settings(str(tmp_path / "absent.yaml"))
    assert s.mongo.uri == "mongodb://localhost:27017"
    assert s.mongo.db == "internet-store"
    assert s.mongo.server_selection_timeout_ms == 5000
    assert s.indexes.strict is False


def test_yaml_values_are_loaded(tmp_path):
    path = _write_config(
        tmp_path,
        """
        mongo:
          uri: "mongodb://db.internal:27017"
          db: "store-staging"
          server_selection_timeout_ms: 1500
        indexes:
          strict: true
        """,
    )
    s = load_settings(path)
    assert s.mongo.uri == "mongodb://db.internal:27017"
    assert s.mongo.db == "store-staging"
    assert s.mongo.server_selection_timeout_ms == 1500
    assert s.indexes.strict is True


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = _write_config(
        tmp_path,
        """
        mongo:
          uri: "mongodb://from-yaml:27017"
          db: "from-yaml"
        """,
    )
    monkeypatch.setenv("MONGODB_URI", "mongodb://from-env:27017")
    monkeypatch.setenv("MONGODB_DB", "from-env")
    monkeypatch.setenv("STOREINIT_STRICT_INDEXES", "yes")
    s = load_settings(path)
    assert s.mongo.uri == "mongodb://from-env:27017"
    assert s.mongo.db == "from-env"
    assert s.indexes.strict is True


def test_strict_env_flag_false_values(tmp_path, monkeypatch):
    path = _write_config(tmp_path, "indexes:\n  strict: true\n")
    monkeypatch.setenv("STOREINIT_STRICT_INDEXES", "0")
    assert load_settings(path).indexes.strict is False


def test_empty_file_is_tolerated(tmp_path):
    path = _write_config(tmp_path, "")
    assert load_settings(path).mongo.db == "internet-store"


def test_invalid_values_are_rejected(tmp_path):
    path = _write_config(
        tmp_path,
        """
        mongo:
          server_selection_timeout_ms: "soon"
        """,
    )
    with pytest.raises(ValidationError):
        load_settings(path)


def test_top_level_list_is_rejected(tmp_path):
    path = _write_config(tmp_path, "- a\n- b\n")
    with pytest.raises(ValueError, match="mapping at the top level"):
        load_settings(path)


def test_non_mapping_section_is_rejected(tmp_path):
    path = _write_config(tmp_path, "mongo:\n  - mongodb://a\n  - mongodb://b\n")
    with pytest.raises(ValueError, match="'mongo' must be a mapping"):
        load_settings(path)
