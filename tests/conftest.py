"""Pytest configuration and shared fixtures for the mongopager tests."""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest
from bson import ObjectId
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mongopager.config import Settings, get_settings
from mongopager.main import create_app
from mongopager.pagination.codec import get_field
from mongopager.routes.documents import get_executor


logging.getLogger("pymongo").setLevel(logging.WARNING)


_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda a, b: a == b,
    "$gt": lambda a, b: a > b,
    "$lt": lambda a, b: a < b,
    "$gte": lambda a, b: a >= b,
    "$lte": lambda a, b: a <= b,
}


def _compare(value: Any, operator: str, target: Any) -> bool:
    if operator == "$eq":
        return value == target
    if operator == "$ne":
        return value != target
    if operator == "$in":
        return value in target
    # Range operators never match across null, as in MongoDB
    if value is None or target is None:
        return False
    try:
        return _COMPARATORS[operator](value, target)
    except TypeError:
        return False


def matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Evaluate the subset of the MongoDB query language the paginator emits."""
    for key, condition in query.items():
        if key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
        elif isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            value = get_field(document, key)
            if not all(_compare(value, op, target) for op, target in condition.items()):
                return False
        elif get_field(document, key) != condition:
            return False
    return True


def _sort_key(value: Any) -> Tuple[int, Any]:
    return (0, 0) if value is None else (1, value)


class FakeExecutor:
    """In-memory executor over a list of documents."""

    def __init__(
        self,
        documents: Sequence[Dict[str, Any]],
        fail_find: Optional[Exception] = None,
        fail_count: Optional[Exception] = None,
        extra_rows: int = 0
    ):
        self.documents = list(documents)
        self.fail_find = fail_find
        self.fail_count = fail_count
        self.extra_rows = extra_rows
        self.find_calls: List[Dict[str, Any]] = []
        self.count_calls: List[Dict[str, Any]] = []

    async def execute_find(self, filter, sort, limit, skip=0):
        self.find_calls.append({"filter": filter, "sort": list(sort), "limit": limit, "skip": skip})
        if self.fail_find:
            raise self.fail_find
        rows = [doc for doc in self.documents if matches(doc, filter)]
        for field, order in reversed(list(sort)):
            rows.sort(key=lambda doc: _sort_key(get_field(doc, field)), reverse=order < 0)
        return rows[skip:skip + limit + self.extra_rows]

    async def execute_count(self, filter):
        self.count_calls.append({"filter": filter})
        if self.fail_count:
            raise self.fail_count
        return sum(1 for doc in self.documents if matches(doc, filter))


@pytest.fixture
def make_executor() -> Callable[..., FakeExecutor]:
    """Factory for in-memory executors."""
    return FakeExecutor


@pytest.fixture
def numbered_documents() -> List[Dict[str, Any]]:
    """Five documents with _id 1..5 and a category."""
    return [
        {"_id": i, "name": f"item-{i}", "category": "odd" if i % 2 else "even"}
        for i in range(1, 6)
    ]


@pytest.fixture
def fruits() -> List[Dict[str, Any]]:
    """Fruit documents with duplicated counts."""
    return [
        {"_id": 1, "name": "Apple", "how_many": 5},
        {"_id": 2, "name": "Avocado", "how_many": 5},
        {"_id": 3, "name": "Orange", "how_many": 3},
        {"_id": 4, "name": "Blueberry", "how_many": 10},
        {"_id": 5, "name": "Bananas", "how_many": 10},
        {"_id": 6, "name": "Blackberry", "how_many": 12},
        {"_id": 7, "name": "Grapes", "how_many": 12},
    ]


@pytest.fixture
def object_id_documents() -> List[Dict[str, Any]]:
    """Documents keyed by ObjectId, as MongoDB stores them."""
    return [
        {"_id": ObjectId(f"65a0000000000000000000{i:02x}"), "title": f"Note {i}", "rank": i % 3}
        for i in range(1, 8)
    ]


@pytest.fixture
def test_settings() -> Settings:
    """Override settings for testing."""
    return Settings(
        mongo_url="mongodb://localhost:27017",
        mongo_database="mongopager_test",
        log_level="ERROR",
        default_page_size=2,
        max_page_size=50
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Create FastAPI application instance for testing."""
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: test_settings
    return application


@pytest.fixture
def client_for(app: FastAPI) -> Callable[..., TestClient]:
    """Build a test client whose document routes use the given executor."""
    def _client(executor, raise_server_exceptions: bool = True) -> TestClient:
        app.dependency_overrides[get_executor] = lambda: executor
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)
    return _client


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, in-memory executor)")
    config.addinivalue_line("markers", "integration: Integration tests (live MongoDB)")


def pytest_collection_modifyitems(config, items):
    """Mark tests based on their location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


def pytest_runtest_setup(item):
    """Skip tests that require MongoDB if it's not available."""
    if item.get_closest_marker("integration"):
        import socket
        try:
            with socket.create_connection(("localhost", 27017), timeout=1):
                pass
        except OSError:
            pytest.skip("MongoDB not available for integration tests")
