from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional
from uuid import uuid4
from errors import NotFoundError, PersistenceError, ValidationError
from lifecycle import apply_update, coerce_fields, create_assignment, toggle_complete
from models import (
    Assignment,
    AssignmentFields,
    AssignmentUpdate,
    ClassFields,
    ClassUpdate,
    Document,
    SchoolClass,
)
from reset import reset_document
from storage import DocumentBackend


logger = logging.getLogger(__name__)


class HomeworkStore:
    """
    Owns the homework document and every mutation of it.

    The document is loaded once when the store is created and written back
    in full after each successful change. Deleting something that does not
    exist is a no-op; updating or toggling it raises NotFoundError.
    """

    def __init__(
        self,
        backend: DocumentBackend,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.backend = backend
        self.clock = clock
        self.document = self._load()

    def _load(self) -> Document:
        try:
            document = self.backend.load()
        except PersistenceError:
            logger.warning("Falling back to an empty document", exc_info=True)
            document = None
        if document is None:
            logger.info("Starting with an empty homework document")
            document = Document(last_reset=self.clock())
        return document

    def reload(self) -> Document:
        self.document = self._load()
        return self.document

    def persist(self) -> bool:
        try:
            self.backend.save(self.document)
        except PersistenceError:
            # In-memory state stays authoritative until the next successful save
            logger.error("Could not save homework document", exc_info=True)
            return False
        return True

    # Classes

    def list_classes(self) -> List[SchoolClass]:
        return list(self.document.classes)

    def get_class(self, class_id: str) -> SchoolClass:
        found = self._find_class(class_id)
        if found is None:
            raise NotFoundError(f"No class with id {class_id!r}")
        return found

    def _find_class(self, class_id: str) -> Optional[SchoolClass]:
        for school_class in self.document.classes:
            if school_class.id == class_id:
                return school_class
        return None

    def create_class(self, name: str, color: str = "yellow") -> SchoolClass:
        fields = coerce_fields(ClassFields, {"name": name, "color": color})
        clean_name = fields.name.strip()
        if not clean_name:
            raise ValidationError("Class name cannot be empty.")
        school_class = SchoolClass(
            id=str(uuid4()),
            name=clean_name,
            color=fields.color,
            assignments=[],
            created_at=self.clock(),
        )
        self.document.classes.append(school_class)
        logger.debug("Created class %s (%s)", school_class.id, clean_name)
        self.persist()
        return school_class

    def update_class(self, class_id: str, fields: ClassUpdate | Mapping[str, Any]) -> SchoolClass:
        school_class = self.get_class(class_id)
        changes = coerce_fields(ClassUpdate, fields).model_dump(exclude_unset=True)
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Class name cannot be empty.")
            changes["name"] = name
        if "color" in changes and changes["color"] is None:
            raise ValidationError("Class color cannot be cleared.")
        for key, value in changes.items():
            setattr(school_class, key, value)
        self.persist()
        return school_class

    def delete_class(self, class_id: str) -> None:
        remaining = [c for c in self.document.classes if c.id != class_id]
        if len(remaining) == len(self.document.classes):
            logger.debug("delete_class: %s not found", class_id)
            return
        self.document.classes = remaining
        self.persist()

    # Assignments

    def get_assignment(self, class_id: str, assignment_id: str) -> Assignment:
        school_class = self.get_class(class_id)
        for assignment in school_class.assignments:
            if assignment.id == assignment_id:
                return assignment
        raise NotFoundError(f"No assignment with id {assignment_id!r} in class {class_id!r}")

    def create_assignment(
        self,
        class_id: str,
        fields: AssignmentFields | Mapping[str, Any],
    ) -> Assignment:
        school_class = self.get_class(class_id)
        assignment = create_assignment(fields, now=self.clock())
        school_class.assignments.append(assignment)
        logger.debug("Created assignment %s in class %s", assignment.id, class_id)
        self.persist()
        return assignment

    def update_assignment(
        self,
        class_id: str,
        assignment_id: str,
        fields: AssignmentUpdate | Mapping[str, Any],
    ) -> Assignment:
        current = self.get_assignment(class_id, assignment_id)
        updated = apply_update(current, fields)
        school_class = self.get_class(class_id)
        school_class.assignments = [
            updated if a.id == assignment_id else a for a in school_class.assignments
        ]
        self.persist()
        return updated

    def delete_assignment(self, class_id: str, assignment_id: str) -> None:
        school_class = self._find_class(class_id)
        if school_class is None:
            logger.debug("delete_assignment: class %s not found", class_id)
            return
        remaining = [a for a in school_class.assignments if a.id != assignment_id]
        if len(remaining) == len(school_class.assignments):
            logger.debug("delete_assignment: %s not found in %s", assignment_id, class_id)
            return
        school_class.assignments = remaining
        self.persist()

    def toggle_complete(self, class_id: str, assignment_id: str) -> Assignment:
        assignment = toggle_complete(self.get_assignment(class_id, assignment_id))
        self.persist()
        return assignment

    def trigger_reset(self) -> Document:
        reset_document(self.document, now=self.clock())
        self.persist()
        return self.document
