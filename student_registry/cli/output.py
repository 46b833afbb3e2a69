from datetime import date
from typing import List, Sequence

from student_registry.schemas.student import STUDENT_FIELDS, Student


def format_record(student: Student) -> str:
    """One student as compact JSON, dates in YYYY-MM-DD form."""
    return student.model_dump_json()


def _cell(value: object) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_table(students: Sequence[Student], columns: Sequence[str] = STUDENT_FIELDS) -> str:
    """
    Render students as an aligned text table.

    An empty sequence still renders the header and separator.
    """
    rows: List[List[str]] = [
        [_cell(getattr(student, column)) for column in columns]
        for student in students
    ]
    widths = [len(column) for column in columns]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    def line(cells: Sequence[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [line(columns), "-+-".join("-" * width for width in widths)]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines)
