"""Tests for the store that mediates every UI operation."""
from datetime import date

import pytest

from errors import NotFoundError, PersistenceError, ValidationError
from models import Document
from storage import JsonFileBackend, MemoryBackend
from store import HomeworkStore

from conftest import NOW


class FailingBackend(MemoryBackend):
    def save(self, document: Document) -> None:
        raise PersistenceError("disk full")


class BrokenLoadBackend(MemoryBackend):
    def load(self):
        raise PersistenceError("unreadable")


def test_starts_empty_when_nothing_is_stored(store) -> None:
    assert store.list_classes() == []
    assert store.document.last_reset == NOW


def test_create_class_persists_document(store, backend) -> None:
    math = store.create_class("  Math ", "blue")
    assert math.name == "Math"
    assert math.color == "blue"
    assert math.created_at == NOW
    assert backend.payload["classes"][0]["name"] == "Math"
    assert backend.saves == 1


def test_create_class_validates_name_and_color(store, backend) -> None:
    with pytest.raises(ValidationError):
        store.create_class("  ")
    with pytest.raises(ValidationError):
        store.create_class("Art", "teal")
    assert store.list_classes() == []
    assert backend.saves == 0


def test_update_class(store) -> None:
    math = store.create_class("Math")
    store.update_class(math.id, {"color": "green"})
    assert store.get_class(math.id).color == "green"
    assert store.get_class(math.id).name == "Math"

    with pytest.raises(ValidationError):
        store.update_class(math.id, {"name": ""})
    with pytest.raises(NotFoundError):
        store.update_class("missing", {"name": "x"})


def test_delete_class_removes_its_assignments(store) -> None:
    math = store.create_class("Math")
    store.create_assignment(math.id, {"title": "HW", "dueDate": "2024-01-12"})
    store.delete_class(math.id)
    assert store.list_classes() == []


def test_delete_missing_class_is_noop(store, backend) -> None:
    store.create_class("Math")
    saves = backend.saves
    store.delete_class("missing")
    assert len(store.list_classes()) == 1
    assert backend.saves == saves


def test_assignment_crud(store, backend) -> None:
    math = store.create_class("Math")
    hw = store.create_assignment(math.id, {"title": "HW 1", "dueDate": "2024-01-12"})
    assert backend.payload["classes"][0]["assignments"][0]["dueDate"] == "2024-01-12"

    updated = store.update_assignment(math.id, hw.id, {"title": "HW 1 (revised)"})
    assert store.get_assignment(math.id, hw.id).title == "HW 1 (revised)"
    assert updated.title == "HW 1 (revised)"

    store.toggle_complete(math.id, hw.id)
    assert store.get_assignment(math.id, hw.id).is_completed is True

    store.delete_assignment(math.id, hw.id)
    assert store.get_class(math.id).assignments == []


def test_assignment_not_found_semantics(store) -> None:
    math = store.create_class("Math")
    with pytest.raises(NotFoundError):
        store.create_assignment("missing", {"title": "HW", "dueDate": "2024-01-12"})
    with pytest.raises(NotFoundError):
        store.update_assignment(math.id, "missing", {"title": "x"})
    with pytest.raises(NotFoundError):
        store.toggle_complete(math.id, "missing")
    store.delete_assignment(math.id, "missing")
    store.delete_assignment("missing", "missing")


def test_failed_validation_leaves_document_unchanged(store, backend) -> None:
    math = store.create_class("Math")
    hw = store.create_assignment(math.id, {"title": "HW", "dueDate": "2024-01-12"})
    saves = backend.saves
    with pytest.raises(ValidationError):
        store.update_assignment(math.id, hw.id, {"title": ""})
    with pytest.raises(ValidationError):
        store.create_assignment(math.id, {"title": ""})
    assert store.get_assignment(math.id, hw.id).title == "HW"
    assert len(store.get_class(math.id).assignments) == 1
    assert backend.saves == saves


def test_toggle_blocked_for_future_assignment(store) -> None:
    math = store.create_class("Math")
    later = store.create_assignment(math.id, {
        "title": "Final project",
        "dueDate": "2024-04-01",
        "isFutureAssignment": True,
    })
    with pytest.raises(ValidationError):
        store.toggle_complete(math.id, later.id)
    assert store.get_assignment(math.id, later.id).is_completed is False


def test_trigger_reset_persists(store, backend) -> None:
    math = store.create_class("Math")
    done = store.create_assignment(math.id, {"title": "A", "dueDate": "2024-01-08"})
    quiz = store.create_assignment(math.id, {
        "title": "B",
        "dueDate": "2024-01-08",
        "isRecurring": True,
        "daysOfWeek": [1],
        "endDate": "2030-01-01",
    })
    store.toggle_complete(math.id, done.id)
    store.toggle_complete(math.id, quiz.id)

    store.trigger_reset()

    stored = backend.payload["classes"][0]["assignments"]
    assert [a["title"] for a in stored] == ["B"]
    assert stored[0]["dueDate"] == "2024-01-15"
    assert stored[0]["isCompleted"] is False
    assert backend.payload["lastReset"].startswith("2024-01-10T15:30")


def test_document_survives_reload(backend) -> None:
    first = HomeworkStore(backend, clock=lambda: NOW)
    math = first.create_class("Math", "pink")
    first.create_assignment(math.id, {"title": "HW", "dueDate": "2024-01-12", "dueTime": "08:00"})

    second = HomeworkStore(backend, clock=lambda: NOW)
    [loaded] = second.list_classes()
    assert loaded.color == "pink"
    assert loaded.assignments[0].due_date == date(2024, 1, 12)
    assert loaded.assignments[0].due_time == "08:00"


def test_save_failure_is_logged_not_raised(caplog) -> None:
    store = HomeworkStore(FailingBackend(), clock=lambda: NOW)
    math = store.create_class("Math")
    assert store.get_class(math.id).name == "Math"
    assert "Could not save" in caplog.text
    assert store.persist() is False


def test_load_failure_degrades_to_empty_document() -> None:
    store = HomeworkStore(BrokenLoadBackend(), clock=lambda: NOW)
    assert store.list_classes() == []


def test_corrupt_payload_degrades_to_empty_document() -> None:
    store = HomeworkStore(MemoryBackend({"classes": "not a list"}), clock=lambda: NOW)
    assert store.list_classes() == []


def test_reload_reads_backend_again(store, backend) -> None:
    store.create_class("Math")
    backend.payload = {"classes": [], "lastReset": "2024-01-01T00:00:00"}
    store.reload()
    assert store.list_classes() == []


def test_undecodable_file_degrades_to_empty_document(tmp_path) -> None:
    path = tmp_path / "doc.json"
    path.write_bytes(b'{"classes": [], "lastReset": "\xff\xfe"}')

    store = HomeworkStore(JsonFileBackend(path), clock=lambda: NOW)

    assert store.list_classes() == []
    store.create_class("Math")
    assert JsonFileBackend(path).load().classes[0].name == "Math"
