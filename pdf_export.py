from __future__ import annotations
from datetime import datetime
from io import BytesIO
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from models import Document
from overview import (
    class_progress,
    due_label,
    format_time_12h,
    is_overdue,
    progress_totals,
    recurring_text,
    sorted_assignments,
)


def todo_list_to_pdf(document: Document, now: datetime | None = None) -> bytes:
    now = now or datetime.now()
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        leftMargin=40,
        rightMargin=40,
        topMargin=40,
        bottomMargin=40,
    )
    styles = getSampleStyleSheet()
    elems = []

    totals = progress_totals(document)
    elems.append(Paragraph(f"Homework: {now.strftime('%A, %Y-%m-%d')}", styles["Title"]))
    elems.append(Spacer(1, 10))
    elems.append(Paragraph(
        f"Completed: {totals['completed']}/{totals['total']} "
        f"| Last reset: {document.last_reset.strftime('%Y-%m-%d %H:%M')}",
        styles["Normal"],
    ))
    elems.append(Spacer(1, 12))

    if not document.classes:
        elems.append(Paragraph("No classes yet.", styles["Normal"]))

    for school_class in document.classes:
        progress = class_progress(school_class)
        elems.append(Paragraph(
            f"{school_class.name} ({progress['completed']}/{progress['total']} completed)",
            styles["Heading3"],
        ))
        table_data = [["Assignment", "Due", "Time", "Status", "Notes"]]
        overdue_rows = []
        for assignment in sorted_assignments(school_class):
            if assignment.is_future_assignment:
                status = "Future"
            elif assignment.is_completed:
                status = "Done"
            elif is_overdue(assignment, now):
                status = "Overdue"
                overdue_rows.append(len(table_data))
            else:
                status = "Open"
            title = assignment.title
            repeat = recurring_text(assignment)
            if repeat:
                title = f"{title} ({repeat})"
            table_data.append([
                title,
                due_label(assignment.due_date, now),
                format_time_12h(assignment.due_time),
                status,
                assignment.notes or "",
            ])

        table = Table(table_data, hAlign="LEFT", colWidths=[170, 70, 60, 55, 175])
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ]
        for row in overdue_rows:
            style.append(("TEXTCOLOR", (0, row), (-1, row), colors.red))
        table.setStyle(TableStyle(style))
        elems.append(table)
        elems.append(Spacer(1, 8))

    doc.build(elems)
    return buf.getvalue()
