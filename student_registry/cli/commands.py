import logging
import re
import sys
from typing import Callable, Dict, List, Optional, TextIO

from sqlalchemy.orm import sessionmaker

from student_registry.core.database import get_db
from student_registry.core.exceptions import UsageError
from student_registry.core.handlers import render_error
from student_registry.cli.output import format_record, format_table
from student_registry.services.student import student as crud_student
from student_registry.services.student.student import StudentId

logger = logging.getLogger(__name__)

USAGE = """Commands:
  list
  add "<first>" "<last>" "<email>" "<YYYY-MM-DD>"
  update <student_id> "<new_email>"
  delete <student_id>"""

ADD_USAGE = 'Usage: add "<first>" "<last>" "<email>" "<YYYY-MM-DD>"'
UPDATE_USAGE = 'Usage: update <student_id> "<new_email>"'
DELETE_USAGE = "Usage: delete <student_id>"

NUMERIC_ID = re.compile(r"^\s*[+-]?[0-9]+\s*$")


def _positional(args: List[str], count: int, usage: str) -> List[str]:
    """First ``count`` arguments, all present and non-empty; extras are ignored."""
    values = list(args[:count])
    if len(values) < count or not all(value.strip() for value in values):
        raise UsageError(usage)
    return values


def _student_id(raw: str) -> StudentId:
    """
    Plain ASCII integers become ints. Anything else (including "0_1" or
    non-ASCII digits, which int() would accept) is passed through untouched
    so the database reports it as invalid input.
    """
    if NUMERIC_ID.match(raw):
        return int(raw)
    return raw


def list_students(args: List[str], session_factory: sessionmaker, out: TextIO) -> None:
    """
    Print every student as a table
    """
    with get_db(session_factory) as db:
        students = crud_student.get_students(db)
    print(format_table(students), file=out)


def add_student(args: List[str], session_factory: sessionmaker, out: TextIO) -> None:
    """
    Insert a student

    Requires:
    - **first**, **last**: names
    - **email**: must not belong to another student
    - **date**: enrollment date, YYYY-MM-DD
    """
    first, last, email, enrolled = _positional(args, 4, ADD_USAGE)
    with get_db(session_factory) as db:
        student = crud_student.create_student(db, first, last, email, enrolled)
    print(f"Inserted: {format_record(student)}", file=out)


def update_student(args: List[str], session_factory: sessionmaker, out: TextIO) -> None:
    """
    Change a student's email; an unknown id is reported, not treated as an error
    """
    raw_id, new_email = _positional(args, 2, UPDATE_USAGE)
    student_id = _student_id(raw_id)
    with get_db(session_factory) as db:
        student = crud_student.update_student_email(db, student_id, new_email)
    if student is None:
        print(f"No student found for id = {student_id}", file=out)
    else:
        print(f"Updated: {format_record(student)}", file=out)


def delete_student(args: List[str], session_factory: sessionmaker, out: TextIO) -> None:
    (raw_id,) = _positional(args, 1, DELETE_USAGE)
    with get_db(session_factory) as db:
        deleted = crud_student.delete_student(db, _student_id(raw_id))
    print("Deleted." if deleted == 1 else "No student deleted (not found).", file=out)


COMMANDS: Dict[str, Callable[[List[str], sessionmaker, TextIO], None]] = {
    "list": list_students,
    "add": add_student,
    "update": update_student,
    "delete": delete_student,
}


def run_command(
    command: str,
    args: List[str],
    session_factory: sessionmaker,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """
    Run one command and return the process exit status.

    Unknown or missing commands print the usage summary and succeed.
    Every failure is caught here, rendered to ``err`` and mapped to status 1.
    """
    out = out or sys.stdout
    err = err or sys.stderr

    handler = COMMANDS.get(command)
    if handler is None:
        print(USAGE, file=out)
        return 0

    try:
        handler(args, session_factory, out)
    except Exception as exc:
        logger.debug("Command %r failed", command)
        print(render_error(exc), file=err)
        return 1
    return 0
