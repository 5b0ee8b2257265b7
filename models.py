from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import List, Literal, Optional


StickyColor = Literal["yellow", "pink", "blue", "green", "purple", "orange"]
Frequency = Literal["weekly", "biweekly", "monthly"]

STICKY_COLORS: List[str] = ["yellow", "pink", "blue", "green", "purple", "orange"]
DEFAULT_DUE_TIME = "23:59"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _check_days(days: List[int]) -> List[int]:
    for day in days:
        if day < 0 or day > 6:
            raise ValueError("days of week must be between 0 (Sun) and 6 (Sat)")
    return sorted(set(days))


class CamelModel(BaseModel):
    # Stored documents use camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecurringSchedule(CamelModel):
    days_of_week: List[int] = Field(default_factory=list)  # 0=Sun ... 6=Sat
    frequency: Frequency = "weekly"
    end_date: date
    next_due_date: Optional[date] = None

    @field_validator("days_of_week")
    @classmethod
    def _valid_days(cls, value: List[int]) -> List[int]:
        return _check_days(value)


class Assignment(CamelModel):
    id: str
    title: str
    due_date: date
    due_time: str = Field(default=DEFAULT_DUE_TIME, pattern=TIME_PATTERN)
    notes: str = ""
    is_completed: bool = False
    is_recurring: bool = False
    is_future_assignment: bool = False
    recurring_schedule: Optional[RecurringSchedule] = None
    created_at: datetime

    @field_validator("due_time", mode="before")
    @classmethod
    def _due_time_default(cls, value: object) -> object:
        # Older documents have no due time at all
        return value or DEFAULT_DUE_TIME

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value: object) -> object:
        return "" if value is None else value


class SchoolClass(CamelModel):
    id: str
    name: str
    color: StickyColor = "yellow"
    assignments: List[Assignment] = Field(default_factory=list)
    created_at: datetime


class Document(CamelModel):
    classes: List[SchoolClass] = Field(default_factory=list)
    last_reset: datetime = Field(default_factory=datetime.now)


class AssignmentFields(CamelModel):
    """Form input for a new assignment. Required fields are checked by the lifecycle engine."""

    title: str = ""
    due_date: Optional[date] = None
    due_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    notes: Optional[str] = None
    is_recurring: bool = False
    is_future_assignment: bool = False
    days_of_week: List[int] = Field(default_factory=list)
    frequency: Frequency = "weekly"
    end_date: Optional[date] = None

    @field_validator("days_of_week")
    @classmethod
    def _valid_days(cls, value: List[int]) -> List[int]:
        return _check_days(value)


class AssignmentUpdate(CamelModel):
    """
    Partial edit of an assignment.
    Only fields explicitly set are applied; an explicit None clears notes
    and restores the default due time.
    """

    title: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    notes: Optional[str] = None
    is_completed: Optional[bool] = None
    is_recurring: Optional[bool] = None
    is_future_assignment: Optional[bool] = None
    days_of_week: Optional[List[int]] = None
    frequency: Optional[Frequency] = None
    end_date: Optional[date] = None

    @field_validator("days_of_week")
    @classmethod
    def _valid_days(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        return None if value is None else _check_days(value)


class ClassFields(CamelModel):
    name: str = ""
    color: StickyColor = "yellow"


class ClassUpdate(CamelModel):
    name: Optional[str] = None
    color: Optional[StickyColor] = None
