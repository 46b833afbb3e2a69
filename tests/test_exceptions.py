import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from student_registry.core.exceptions import (
    ConstraintViolation,
    InvalidInput,
    StoreFailure,
    UsageError,
    classify_db_error,
)
from student_registry.core.handlers import (
    DUPLICATE_EMAIL_MESSAGE,
    INVALID_INPUT_MESSAGE,
    render_error,
)


class FakePsycopg2Error(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


class FakePsycopgError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


def _wrap(error_cls, orig):
    return error_cls("UPDATE students SET email = %(email)s", {}, orig)


def test_unique_violation_is_constraint_violation():
    orig = FakePsycopg2Error('duplicate key value violates unique constraint "students_email_key"', "23505")

    error = classify_db_error(_wrap(IntegrityError, orig))

    assert isinstance(error, ConstraintViolation)
    assert error.code == "DUPLICATE_EMAIL"
    assert error.sqlstate == "23505"


@pytest.mark.parametrize("code", ["22P02", "22007", "22008"])
def test_malformed_values_are_invalid_input(code):
    orig = FakePsycopg2Error("invalid input syntax for type integer: \"abc\"", code)

    error = classify_db_error(_wrap(DataError, orig))

    assert isinstance(error, InvalidInput)
    assert error.code == "INVALID_INPUT"


def test_psycopg3_sqlstate_is_read():
    orig = FakePsycopgError("duplicate key", sqlstate="23505")

    assert isinstance(classify_db_error(_wrap(IntegrityError, orig)), ConstraintViolation)


def test_other_errors_keep_the_raw_message():
    orig = FakePsycopg2Error('relation "students" does not exist', "42P01")

    error = classify_db_error(_wrap(DataError, orig))

    assert type(error) is StoreFailure
    assert error.message == 'relation "students" does not exist'


def test_error_without_code_is_unclassified():
    orig = FakePsycopg2Error("could not connect to server: Connection refused")

    error = classify_db_error(_wrap(OperationalError, orig))

    assert type(error) is StoreFailure
    assert error.sqlstate is None
    assert "Connection refused" in error.message


def test_render_error_messages():
    assert render_error(ConstraintViolation("dup")) == DUPLICATE_EMAIL_MESSAGE
    assert render_error(InvalidInput("bad")) == INVALID_INPUT_MESSAGE
    assert render_error(UsageError("Usage: delete <student_id>")) == "Usage: delete <student_id>"
    assert render_error(StoreFailure("server closed the connection")) == "server closed the connection"
    assert render_error(RuntimeError("boom")) == "boom"
