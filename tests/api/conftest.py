"""API test fixtures: FastAPI app over a temp catalog document + httpx client.

Invariants:
    - Every test gets a fresh app whose CatalogStore writes under tmp_path
    - The lifespan does not run under ASGITransport, so the store is injected
"""

import pytest
from httpx import ASGITransport, AsyncClient

from fengshui_catalog.config import Settings
from fengshui_catalog.infrastructure.json_storage import JsonFileStorage
from fengshui_catalog.main import create_app
from fengshui_catalog.services.catalog_store import CatalogStore


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "fengShuiData.json"


@pytest.fixture
def catalog_store(data_file):
    return CatalogStore(JsonFileStorage(data_file))


@pytest.fixture
def test_app(data_file, catalog_store):
    return create_app(Settings(data_file=data_file), store=catalog_store)


@pytest.fixture
async def client(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://test",
    ) as c:
        yield c
