from __future__ import annotations
import copy
import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol
from pydantic import ValidationError as PydanticValidationError
from errors import PersistenceError
from models import Document
from paths import DOCUMENT_FILENAME, data_path


logger = logging.getLogger(__name__)


class DocumentBackend(Protocol):
    def load(self) -> Optional[Document]:
        ...

    def save(self, document: Document) -> None:
        ...


def _backup_file(path: Path, content: str | bytes) -> None:
    try:
        backup = path.with_suffix(path.suffix + ".bak")
        if isinstance(content, bytes):
            backup.write_bytes(content)
        else:
            backup.write_text(content, encoding="utf-8")
        logger.warning("Unreadable data in %s copied to %s", path, backup)
    except OSError:
        # The caller still starts from an empty payload
        logger.warning("Could not back up unreadable data in %s", path, exc_info=True)


def load_json(path: Path | str) -> Any:
    """
    Load JSON from path with safety:
    - If missing or unreadable: return {}
    - If empty, not UTF-8 or invalid: write .bak and return {}
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        raw_bytes = path.read_bytes()
    except OSError:
        logger.warning("Could not read %s", path, exc_info=True)
        return {}

    try:
        raw_text = raw_bytes.decode("utf-8")
    except UnicodeDecodeError:
        _backup_file(path, raw_bytes)
        return {}

    text = raw_text.strip()
    if not text:
        _backup_file(path, raw_text)
        return {}

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        _backup_file(path, raw_text)
        return {}


def save_json(path: Path | str, payload: Any) -> None:
    """
    Atomic JSON write: write to temp file then replace target.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp = path.with_suffix(path.suffix + ".tmp")
    temp.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    temp.replace(path)


def dump_document(document: Document) -> dict:
    return document.model_dump(mode="json", by_alias=True)


def parse_document(payload: Any) -> Optional[Document]:
    """Validate a stored payload, returning None when it is not a usable document."""
    if not isinstance(payload, dict) or not payload:
        return None
    try:
        return Document.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning("Stored document failed validation: %s", exc.errors()[0].get("msg"))
        return None


class JsonFileBackend:
    """Whole-document JSON file in the local data directory."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else data_path(DOCUMENT_FILENAME)

    def load(self) -> Optional[Document]:
        payload = load_json(self.path)
        document = parse_document(payload)
        if document is None and payload:
            _backup_file(self.path, json.dumps(payload, ensure_ascii=False, indent=2))
        return document

    def save(self, document: Document) -> None:
        try:
            save_json(self.path, dump_document(document))
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc


class MemoryBackend:
    """Keeps the serialized document in a plain mapping, as a key-value store would."""

    def __init__(self, payload: Optional[dict] = None) -> None:
        self.payload = payload
        self.saves = 0

    def load(self) -> Optional[Document]:
        if self.payload is None:
            return None
        return parse_document(copy.deepcopy(self.payload))

    def save(self, document: Document) -> None:
        self.payload = dump_document(document)
        self.saves += 1
