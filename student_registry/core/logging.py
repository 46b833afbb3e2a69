# student_registry/core/logging.py
import logging
import sys


# Configure standard Python logging
def setup_logging(level: str = "WARNING") -> logging.Logger:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)  # stdout is reserved for command output
        ]
    )
    return logging.getLogger("student_registry")
