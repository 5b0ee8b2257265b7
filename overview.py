from __future__ import annotations
from datetime import datetime, timedelta
from typing import Dict, List
from models import Assignment, Document, SchoolClass
from schedule import DAY_NAMES, due_datetime, is_same_calendar_day, parse_date


FREQUENCY_LABELS = {"weekly": "Weekly", "biweekly": "Biweekly", "monthly": "Monthly"}


def _counted(assignments: List[Assignment]) -> List[Assignment]:
    # Future assignments are placeholders and never count toward progress
    return [a for a in assignments if not a.is_future_assignment]


def progress_totals(document: Document) -> Dict[str, int]:
    total = completed = 0
    for school_class in document.classes:
        counted = _counted(school_class.assignments)
        total += len(counted)
        completed += sum(1 for a in counted if a.is_completed)
    return {"total": total, "completed": completed}


def class_progress(school_class: SchoolClass) -> Dict[str, float]:
    counted = _counted(school_class.assignments)
    total = len(counted)
    completed = sum(1 for a in counted if a.is_completed)
    percent = (completed / total) * 100 if total else 0.0
    return {"completed": completed, "total": total, "percent": percent}


def sorted_assignments(school_class: SchoolClass) -> List[Assignment]:
    return sorted(school_class.assignments, key=lambda a: due_datetime(a.due_date, a.due_time))


def due_label(due_date, now: datetime | None = None) -> str:
    now = now or datetime.now()
    d = parse_date(due_date)
    if is_same_calendar_day(d, now):
        return "Today"
    if is_same_calendar_day(d, now + timedelta(days=1)):
        return "Tomorrow"
    return f"{d.month}/{d.day}/{d.year}"


def format_time_12h(value: str | None) -> str:
    if not value:
        return "11:59 PM"
    hours, minutes = value.split(":")
    hour = int(hours)
    ampm = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes} {ampm}"


def recurring_text(assignment: Assignment) -> str:
    schedule = assignment.recurring_schedule
    if schedule is None:
        return ""
    days = ", ".join(DAY_NAMES[d] for d in schedule.days_of_week)
    return f"{FREQUENCY_LABELS[schedule.frequency]} {days}"


def is_overdue(assignment: Assignment, now: datetime | None = None) -> bool:
    if assignment.is_completed or assignment.is_future_assignment:
        return False
    now = now or datetime.now()
    return due_datetime(assignment.due_date, assignment.due_time) < now


def todo_items(document: Document, now: datetime | None = None) -> List[dict]:
    """Every active assignment across all classes, soonest first."""
    now = now or datetime.now()
    items = []
    for school_class in document.classes:
        for assignment in _counted(school_class.assignments):
            items.append({
                "class_id": school_class.id,
                "class_name": school_class.name,
                "class_color": school_class.color,
                "assignment": assignment,
                "due": due_datetime(assignment.due_date, assignment.due_time),
                "due_label": due_label(assignment.due_date, now),
                "time_label": format_time_12h(assignment.due_time),
                "recurring": recurring_text(assignment),
                "overdue": is_overdue(assignment, now),
            })

    items.sort(key=lambda x: (x["due"], x["assignment"].title.lower()))
    return items
