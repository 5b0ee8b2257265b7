from __future__ import annotations
from datetime import datetime, time
from icalendar import Calendar, Todo
from models import Assignment, Document, RecurringSchedule, SchoolClass
from overview import recurring_text
from schedule import due_datetime


RRULE_FREQUENCIES = {
    "weekly": ("WEEKLY", 1),
    "biweekly": ("WEEKLY", 2),
    "monthly": ("MONTHLY", 1),
}


def recurrence_rule(schedule: RecurringSchedule) -> dict:
    freq, interval = RRULE_FREQUENCIES[schedule.frequency]
    rule = {
        "freq": freq,
        # Floating local time, matching the floating DUE
        "until": datetime.combine(schedule.end_date, time(23, 59)),
    }
    if interval > 1:
        rule["interval"] = interval
    return rule


def _assignment_todo(school_class: SchoolClass, assignment: Assignment) -> Todo:
    todo = Todo()
    todo.add("uid", f"{assignment.id}@homework-tracker")
    todo.add("summary", f"{school_class.name}: {assignment.title}")
    # Due dates carry no time zone, so they are exported as floating times
    todo.add("due", due_datetime(assignment.due_date, assignment.due_time))
    todo.add("dtstamp", assignment.created_at)
    todo.add("status", "COMPLETED" if assignment.is_completed else "NEEDS-ACTION")

    description = assignment.notes
    if assignment.is_recurring and assignment.recurring_schedule is not None:
        todo.add("rrule", recurrence_rule(assignment.recurring_schedule))
        repeat = f"Repeats: {recurring_text(assignment)}"
        description = f"{description}\n{repeat}" if description else repeat
    if description:
        todo.add("description", description)
    return todo


def assignments_to_ics(document: Document, include_completed: bool = True) -> bytes:
    cal = Calendar()
    cal.add("PRODID", "-//Homework Tracker//Local//")
    cal.add("version", "2.0")
    cal.add("X-WR-CALNAME", "Homework")

    for school_class in document.classes:
        for assignment in school_class.assignments:
            if assignment.is_future_assignment:
                continue
            if assignment.is_completed and not include_completed:
                continue
            cal.add_component(_assignment_todo(school_class, assignment))

    return cal.to_ical()
