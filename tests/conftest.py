import pytest
from fastapi.testclient import TestClient

from app.state import MEMORY_STORE


@pytest.fixture(autouse=True)
def clean_store():
    MEMORY_STORE.clear()
    yield
    MEMORY_STORE.clear()


@pytest.fixture
def client():
    import main

    return TestClient(main.app)
