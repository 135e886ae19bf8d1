"""Startup: the lifespan builds and loads the store; a bad document is never fatal.

Invariants:
    - build_store() never raises for a corrupt, unreadable or too-deep document
    - A failed load leaves the catalog empty and the file on disk untouched
    - Without an injected store, the lifespan builds one from settings
"""

import json
import logging

import pytest
from fastapi.testclient import TestClient

from fengshui_catalog.config import Settings
from fengshui_catalog.core.domain_types import Category
from fengshui_catalog.main import build_store, create_app


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _settings(data_file) -> Settings:
    return Settings(data_file=data_file, log_format="text")


# -- build_store ---------------------------------------------------------------

def test_build_store_loads_existing_document(data_file):
    data_file.write_text(
        json.dumps({"BátMôn": [{"id": "g1", "name": "Khai Môn"}]}),
        encoding="utf-8",
    )
    store = build_store(_settings(data_file))
    assert store.get(Category.GATES, "g1").name == "Khai Môn"


def test_build_store_without_document_is_empty(data_file):
    assert len(build_store(_settings(data_file)).state) == 0


@pytest.mark.parametrize("text", [
    "{corrupt", '{"CửuTinh": 3}', "[" * 100_000,
], ids=["invalid-json", "wrong-shape", "too-deep"])
def test_build_store_survives_bad_document(data_file, text):
    data_file.write_text(text, encoding="utf-8")
    store = build_store(_settings(data_file))
    assert len(store.state) == 0
    assert data_file.read_text(encoding="utf-8") == text


def test_build_store_survives_unreadable_path(tmp_path):
    store = build_store(_settings(tmp_path))
    assert len(store.state) == 0


# -- Lifespan ------------------------------------------------------------------

def test_lifespan_builds_store_from_settings(data_file):
    data_file.write_text(
        json.dumps({"CửuTinh": [{"id": "s1", "name": "Thiên Bồng"}]}),
        encoding="utf-8",
    )
    app = create_app(_settings(data_file))
    with TestClient(app) as client:
        assert app.state.catalog_store is not None
        res = client.get(f"/api/v1/catalog/{Category.STARS.value}/s1")
        assert res.status_code == 200
        assert res.json()["record"]["name"] == "Thiên Bồng"


def test_lifespan_with_corrupt_document_serves_empty_catalog(data_file):
    data_file.write_text("{corrupt", encoding="utf-8")
    app = create_app(_settings(data_file))
    with TestClient(app) as client:
        body = client.get("/api/v1/catalog").json()
        assert sum(body["counts"].values()) == 0
        assert client.get("/api/v1/health/ready").status_code == 200
