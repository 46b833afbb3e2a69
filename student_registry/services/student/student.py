import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Union

from sqlalchemy import String, bindparam, delete, insert, select, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from student_registry.core.exceptions import InvalidInput, classify_db_error
from student_registry.models.student import Student as StudentModel
from student_registry.schemas.student import Student

logger = logging.getLogger(__name__)

# Ids come straight from the command line; non-numeric values are left
# for the database to reject.
StudentId = Union[int, str]

students = StudentModel.__table__

SELECT_ALL = select(students).order_by(students.c.student_id)

# The date goes over as text so the database does the parsing
INSERT_STUDENT = (
    insert(students)
    .values(
        first_name=bindparam("new_first_name"),
        last_name=bindparam("new_last_name"),
        email=bindparam("new_email"),
        enrollment_date=bindparam("new_enrollment_date", type_=String),
    )
    .returning(*students.c)
)

UPDATE_EMAIL = (
    update(students)
    .where(students.c.student_id == bindparam("target_id"))
    .values(email=bindparam("new_email"))
    .returning(*students.c)
)

DELETE_STUDENT = delete(students).where(students.c.student_id == bindparam("target_id"))


@contextmanager
def _store_errors(db: Session) -> Iterator[None]:
    """
    Roll back and re-raise driver errors as classified store errors.
    Rows that cannot be read back as a Student are rolled back as invalid input.
    """
    try:
        yield
    except DBAPIError as exc:
        db.rollback()
        raise classify_db_error(exc) from exc
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError too
        db.rollback()
        raise InvalidInput(str(exc)) from exc


def get_students(db: Session) -> List[Student]:
    """Every student, ordered by id."""
    with _store_errors(db):
        rows = db.execute(SELECT_ALL).mappings().all()
        result = [Student.model_validate(dict(row)) for row in rows]
    logger.debug("Fetched %d students", len(result))
    return result


def create_student(
    db: Session,
    first_name: str,
    last_name: str,
    email: str,
    enrollment_date: str,
) -> Student:
    """Insert a student; the database assigns the id and checks the date."""
    with _store_errors(db):
        row = db.execute(
            INSERT_STUDENT,
            {
                "new_first_name": first_name,
                "new_last_name": last_name,
                "new_email": email,
                "new_enrollment_date": enrollment_date,
            },
        ).mappings().one()
        student = Student.model_validate(dict(row))
        db.commit()
    logger.info("Inserted student %s", student.student_id)
    return student


def update_student_email(db: Session, student_id: StudentId, new_email: str) -> Optional[Student]:
    """Change one student's email. Returns None when the id does not exist."""
    with _store_errors(db):
        row = db.execute(
            UPDATE_EMAIL, {"target_id": student_id, "new_email": new_email}
        ).mappings().first()
        student = Student.model_validate(dict(row)) if row is not None else None
        db.commit()
    if student is None:
        logger.info("No student with id %s to update", student_id)
        return None
    logger.info("Updated email of student %s", student_id)
    return student


def delete_student(db: Session, student_id: StudentId) -> int:
    """Delete by id and return how many rows went away (0 or 1)."""
    with _store_errors(db):
        deleted = db.execute(DELETE_STUDENT, {"target_id": student_id}).rowcount
        db.commit()
    logger.info("Deleted %d student(s) with id %s", deleted, student_id)
    return deleted
