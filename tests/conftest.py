"""
Test configuration and fixtures for the shortlink service.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.config import settings
from shortlink_app.dependencies import allocator_for, get_symbol_strategy
from shortlink_app.security import expected_token_digest
from shortlink_app.services.allocator import SymbolAllocator
from shortlink_app.services.link_service import LinkService
from shortlink_app.storage.factory import StoreFactory
from shortlink_app.storage.store import RedirectStore
from shortlink_app.symbols.strategies import SequentialSymbolStrategy

NUMBERS = "0123456789"
TEST_TOKEN = "test-token"


@pytest.fixture
def data_file(tmp_path):
    """Path of a data file inside a per-test temporary directory"""
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file):
    """
    Fresh, empty store installed as the process-wide instance.
    Cleared after the test so nothing leaks between tests.
    """
    StoreFactory.clear_instance()
    allocator_for.cache_clear()
    fresh = RedirectStore(path=data_file)
    StoreFactory._instance = fresh

    yield fresh

    StoreFactory.clear_instance()
    allocator_for.cache_clear()


@pytest.fixture
def link_service(store):
    """Service over the test store, counting with a digits alphabet"""
    allocator = SymbolAllocator(store, SequentialSymbolStrategy(NUMBERS))
    return LinkService(store=store, allocator=allocator)


@pytest.fixture
def auth_headers(monkeypatch):
    """Configure a bearer token and return headers carrying it"""
    monkeypatch.setattr(settings, "token", TEST_TOKEN)
    expected_token_digest.cache_clear()
    yield {"Authorization": f"Bearer {TEST_TOKEN}"}
    expected_token_digest.cache_clear()


@pytest.fixture
def client(store):
    """
    Test client using the temporary store and a digits alphabet.
    This is the main fixture that API tests will use.
    """
    strategy = SequentialSymbolStrategy(NUMBERS)
    app.dependency_overrides[get_symbol_strategy] = lambda: strategy

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
