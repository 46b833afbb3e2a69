# student_registry/core/handlers.py
import logging

from student_registry.core.exceptions import (
    ConstraintViolation,
    InvalidInput,
    StudentRegistryError,
)

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "Error: duplicate email (violates UNIQUE constraint)."
INVALID_INPUT_MESSAGE = "Error: invalid input syntax (check IDs and dates)."


def render_error(exc: BaseException) -> str:
    """Turn any failure raised while running a command into one line for stderr."""
    # 1. Store errors with a dedicated message
    if isinstance(exc, ConstraintViolation):
        return DUPLICATE_EMAIL_MESSAGE
    if isinstance(exc, InvalidInput):
        return INVALID_INPUT_MESSAGE

    # 2. Our own errors (usage, unclassified store failures) carry their message
    if isinstance(exc, StudentRegistryError):
        return exc.message

    # 3. Anything else: log the traceback for debugging, show the raw message
    logger.debug("Unhandled exception: %s", exc, exc_info=exc)
    return str(exc) or exc.__class__.__name__
