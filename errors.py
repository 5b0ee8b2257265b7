from __future__ import annotations


class HomeworkError(Exception):
    """Base class for every error raised by the homework tracker."""


class ValidationError(HomeworkError):
    """An edit was rejected before anything was mutated."""


class NotFoundError(HomeworkError):
    """A class or assignment id does not exist in the document."""


class PersistenceError(HomeworkError):
    """The document could not be read from or written to storage."""
