"""Service test fixtures: CatalogStore over a temp JSON document.

Invariants:
    - Every test gets its own document under tmp_path
    - notifications collects every error handed to the notifier
"""

import pytest

from fengshui_catalog.infrastructure.json_storage import JsonFileStorage
from fengshui_catalog.services.catalog_store import CatalogStore
from tests.services.fake_storage import FailingStorage


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "fengShuiData.json"


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def store(data_file, notifications):
    return CatalogStore(JsonFileStorage(data_file), notify=notifications.append)


@pytest.fixture
def failing_store(notifications):
    return CatalogStore(FailingStorage(), notify=notifications.append)
