from typing import Optional
from sqlalchemy.exc import DBAPIError


class StudentRegistryError(Exception):
    """
    Base class for every error the CLI reports itself.
    Carries a stable code next to the human readable message.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

# =========================================================
# 1. CLI ERRORS
# =========================================================

class UsageError(StudentRegistryError):
    """Missing or empty command arguments, detected before touching the store"""
    def __init__(self, message: str):
        super().__init__(message=message, code="USAGE_ERROR")

# =========================================================
# 2. STORE ERRORS (classified at the database boundary)
# =========================================================

class StoreError(StudentRegistryError):
    """Any failure reported by the database"""
    def __init__(self, message: str, code: str = "DATABASE_ERROR", sqlstate: Optional[str] = None):
        super().__init__(message=message, code=code)
        self.sqlstate = sqlstate


class ConstraintViolation(StoreError):
    """Unique key conflict, i.e. the email is already taken"""
    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message=message, code="DUPLICATE_EMAIL", sqlstate=sqlstate)


class InvalidInput(StoreError):
    """Value the database could not parse (non-numeric id, malformed date)"""
    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message=message, code="INVALID_INPUT", sqlstate=sqlstate)


class StoreFailure(StoreError):
    """Everything else; the raw driver message is kept for display"""
    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message=message, code="DATABASE_ERROR", sqlstate=sqlstate)


UNIQUE_VIOLATION_CODES = {"23505", "SQLITE_CONSTRAINT_UNIQUE"}

# invalid_text_representation, invalid_datetime_format, datetime_field_overflow
INVALID_INPUT_CODES = {"22P02", "22007", "22008"}


def _error_code(orig: object) -> Optional[str]:
    # psycopg2 -> pgcode, psycopg 3 -> sqlstate, sqlite3 -> sqlite_errorname
    for attr in ("pgcode", "sqlstate", "sqlite_errorname"):
        code = getattr(orig, attr, None)
        if code:
            return code
    return None


def classify_db_error(exc: DBAPIError) -> StoreError:
    """Map a SQLAlchemy-wrapped driver error onto the store error variants."""
    orig = exc.orig if exc.orig is not None else exc
    code = _error_code(orig)
    message = str(orig).strip() or str(exc)

    if code in UNIQUE_VIOLATION_CODES:
        return ConstraintViolation(message, sqlstate=code)
    if code in INVALID_INPUT_CODES:
        return InvalidInput(message, sqlstate=code)
    return StoreFailure(message, sqlstate=code)
