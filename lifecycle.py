from __future__ import annotations
import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional, Type, TypeVar
from uuid import uuid4
from pydantic import BaseModel, ValidationError as PydanticValidationError
from errors import ValidationError
from models import (
    DEFAULT_DUE_TIME,
    Assignment,
    AssignmentFields,
    AssignmentUpdate,
    RecurringSchedule,
)


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

SCHEDULE_FIELDS = ("days_of_week", "frequency", "end_date")


def coerce_fields(model: Type[M], fields: M | Mapping[str, Any]) -> M:
    """Validate a mapping of edit fields, reporting problems as ValidationError."""
    if isinstance(fields, model):
        return fields
    try:
        return model.model_validate(dict(fields))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or "input"
        raise ValidationError(f"{where}: {first.get('msg', 'invalid value')}") from exc


def _build_schedule(
    days_of_week: list[int],
    frequency: str,
    end_date: Optional[date],
    due_date: date,
    next_due_date: Optional[date] = None,
    check_end: bool = True,
) -> RecurringSchedule:
    if not days_of_week:
        raise ValidationError("Recurring assignments need at least one day of the week.")
    if end_date is None:
        raise ValidationError("Recurring assignments need an end date.")
    if check_end and end_date < due_date:
        raise ValidationError("End date cannot be before the due date.")
    return RecurringSchedule(
        days_of_week=days_of_week,
        frequency=frequency,
        end_date=end_date,
        next_due_date=next_due_date or due_date,
    )


def create_assignment(
    fields: AssignmentFields | Mapping[str, Any],
    now: datetime | None = None,
) -> Assignment:
    draft = coerce_fields(AssignmentFields, fields)

    title = draft.title.strip()
    if not title:
        raise ValidationError("Assignment title cannot be empty.")
    if draft.due_date is None:
        raise ValidationError("Assignment due date is required.")
    if draft.is_recurring and draft.is_future_assignment:
        raise ValidationError("An assignment cannot be both recurring and a future assignment.")

    schedule = None
    if draft.is_recurring:
        schedule = _build_schedule(
            draft.days_of_week,
            draft.frequency,
            draft.end_date,
            draft.due_date,
        )

    return Assignment(
        id=str(uuid4()),
        title=title,
        due_date=draft.due_date,
        due_time=draft.due_time or DEFAULT_DUE_TIME,
        notes=(draft.notes or "").strip(),
        is_completed=False,
        is_recurring=draft.is_recurring,
        is_future_assignment=draft.is_future_assignment,
        recurring_schedule=schedule,
        created_at=now or datetime.now(),
    )


def apply_update(
    assignment: Assignment,
    fields: AssignmentUpdate | Mapping[str, Any],
) -> Assignment:
    """
    Merge a partial edit into a copy of ``assignment`` and return the copy.

    Fields absent from the edit keep their value and are not re-validated.
    Flagging an assignment as future unchecks it and drops its recurrence,
    and flagging it recurring drops the future flag. Schedule fields are
    rejected unless the result is recurring. The original is left untouched
    when the edit is rejected.
    """
    update = coerce_fields(AssignmentUpdate, fields)
    changes = update.model_dump(exclude_unset=True)
    if not changes:
        return assignment

    merged = assignment.model_copy(deep=True)

    if "title" in changes:
        title = (changes["title"] or "").strip()
        if not title:
            raise ValidationError("Assignment title cannot be empty.")
        merged.title = title
    if "due_date" in changes:
        if changes["due_date"] is None:
            raise ValidationError("Assignment due date is required.")
        merged.due_date = changes["due_date"]
    if "due_time" in changes:
        merged.due_time = changes["due_time"] or DEFAULT_DUE_TIME
    if "notes" in changes:
        merged.notes = (changes["notes"] or "").strip()

    wants_future = changes.get("is_future_assignment")
    wants_recurring = changes.get("is_recurring")
    if wants_future and wants_recurring:
        raise ValidationError("An assignment cannot be both recurring and a future assignment.")

    if wants_future:
        merged.is_future_assignment = True
        merged.is_completed = False
        merged.is_recurring = False
        merged.recurring_schedule = None
    elif wants_future is not None:
        merged.is_future_assignment = False

    if wants_recurring:
        merged.is_recurring = True
        merged.is_future_assignment = False
    elif wants_recurring is not None:
        merged.is_recurring = False
        merged.recurring_schedule = None

    schedule_changed = any(
        changes.get(key) is not None for key in SCHEDULE_FIELDS
    )
    if schedule_changed and not merged.is_recurring:
        raise ValidationError("Schedule fields only apply to recurring assignments.")
    if merged.is_recurring and (wants_recurring or schedule_changed):
        current = merged.recurring_schedule

        def pick(key: str, fallback: Any) -> Any:
            if changes.get(key) is not None:
                return changes[key]
            return getattr(current, key) if current else fallback

        merged.recurring_schedule = _build_schedule(
            pick("days_of_week", []),
            pick("frequency", "weekly"),
            pick("end_date", None),
            merged.due_date,
            current.next_due_date if current else None,
            # rolled-forward assignments may already sit past their end date
            check_end=False,
        )
    if "due_date" in changes and merged.recurring_schedule is not None:
        merged.recurring_schedule.next_due_date = merged.due_date

    if "is_completed" in changes and changes["is_completed"] is not None:
        if changes["is_completed"] and merged.is_future_assignment:
            raise ValidationError("Future assignments cannot be marked complete.")
        merged.is_completed = changes["is_completed"]

    logger.debug("Updated assignment %s fields=%s", assignment.id, sorted(changes))
    return merged


def toggle_complete(assignment: Assignment) -> Assignment:
    if assignment.is_future_assignment:
        raise ValidationError("Future assignments cannot be marked complete.")
    assignment.is_completed = not assignment.is_completed
    return assignment
