"""Shared test fixtures."""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("PROGRESS_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_REQUESTS", "false")

from collections.abc import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from edutube.progress.models import LessonRef  # noqa: E402
from edutube.progress.store import InMemoryKeyValueBackend, ProgressStore  # noqa: E402


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client with a fresh in-memory progress store."""
    from edutube.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def backend() -> InMemoryKeyValueBackend:
    return InMemoryKeyValueBackend()


@pytest.fixture
def store(backend: InMemoryKeyValueBackend) -> ProgressStore:
    return ProgressStore(backend, key_prefix="test-progress-")


@pytest.fixture
def lessons() -> list[LessonRef]:
    """Four lessons split over two modules."""
    return [
        LessonRef(id="L1", module_id="M1"),
        LessonRef(id="L2", module_id="M1"),
        LessonRef(id="L3", module_id="M2"),
        LessonRef(id="L4", module_id="M2"),
    ]
