from __future__ import annotations
import logging
from datetime import datetime
from typing import List
from models import Assignment, Document
from schedule import advance_to_next_occurrence


logger = logging.getLogger(__name__)


def reset_document(document: Document, now: datetime | None = None) -> Document:
    """
    Clear out completed work and roll recurring assignments forward.

    For every completed assignment:
    - not recurring: removed
    - recurring, schedule ended before today: removed
    - recurring with a live schedule: due date moved to the first
      occurrence after today and unchecked
    - recurring without a schedule (older documents): unchecked only

    Incomplete assignments are never touched, so running the reset twice in
    a row changes nothing but ``last_reset``.
    """
    now = now or datetime.now()
    today = now.date()
    purged = rolled = unchecked = 0

    for school_class in document.classes:
        kept: List[Assignment] = []
        for assignment in school_class.assignments:
            if not assignment.is_completed:
                kept.append(assignment)
                continue

            if not assignment.is_recurring:
                purged += 1
                continue

            schedule = assignment.recurring_schedule
            if schedule is None:
                assignment.is_completed = False
                unchecked += 1
                kept.append(assignment)
                continue

            if schedule.end_date < today:
                purged += 1
                continue

            next_due = advance_to_next_occurrence(assignment.due_date, schedule.frequency, now)
            assignment.due_date = next_due
            schedule.next_due_date = next_due
            assignment.is_completed = False
            rolled += 1
            kept.append(assignment)

        school_class.assignments = kept

    document.last_reset = now
    logger.info(
        "Reset at %s: %d purged, %d rolled forward, %d unchecked",
        now.isoformat(timespec="seconds"),
        purged,
        rolled,
        unchecked,
    )
    return document
