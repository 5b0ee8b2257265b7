"""Pytest configuration and fixtures."""
from datetime import date, datetime

import pytest

from lifecycle import create_assignment
from models import Document, SchoolClass
from storage import MemoryBackend
from store import HomeworkStore


# Wednesday afternoon
NOW = datetime(2024, 1, 10, 15, 30)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Keep every test away from the real user data directory."""
    target = tmp_path / "data"
    monkeypatch.setenv("HOMEWORK_TRACKER_DATA_DIR", str(target))
    return target


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend) -> HomeworkStore:
    return HomeworkStore(backend, clock=lambda: NOW)


def make_assignment(title="Homework", due=date(2024, 1, 8), **fields):
    fields.setdefault("due_date", due)
    return create_assignment({"title": title, **fields}, now=NOW)


def make_document(*assignments) -> Document:
    math = SchoolClass(
        id="math",
        name="Math",
        color="blue",
        assignments=list(assignments),
        created_at=NOW,
    )
    return Document(classes=[math], last_reset=datetime(2024, 1, 1, 9, 0))
