import sys, pathlib

import pytest

# Ensure project root is on path for tests
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from arbatai.catalog.store import CatalogStore  # noqa: E402
from arbatai.config import Settings  # noqa: E402


PASSWORD = "matcha-latte"


@pytest.fixture
def catalog_path(tmp_path):
    return tmp_path / "data" / "catalog.json"


@pytest.fixture
def store(catalog_path):
    return CatalogStore(catalog_path)


@pytest.fixture
def settings(catalog_path):
    return Settings(backoffice_password=PASSWORD, catalog_path=catalog_path)


@pytest.fixture
def client(settings):
    from fastapi.testclient import TestClient

    from arbatai.main import create_app

    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def admin(client):
    resp = client.post("/backoffice/login", json={"password": PASSWORD})
    assert resp.status_code == 200
    return client
