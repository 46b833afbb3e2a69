import argparse
import sys
from typing import List, Optional

from student_registry.core.config import get_settings
from student_registry.core.database import open_database
from student_registry.core.handlers import render_error
from student_registry.core.logging import setup_logging
from student_registry.cli.commands import run_command


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="students",
        description="Manage the students table: list, add, update, delete",
        add_help=False,
    )
    parser.add_argument("command", nargs="?", help="list | add | update | delete")
    # keep command arguments verbatim, even ones starting with "-"
    parser.add_argument("args", nargs=argparse.REMAINDER)
    # unknown flags fall through to the usage summary
    args, _ = parser.parse_known_args(argv)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point: one command per process.

    The connection pool is created lazily and disposed before returning,
    on success and on failure alike.
    """
    args = parse_args(argv)
    try:
        settings = get_settings()
        setup_logging(settings.LOG_LEVEL)
        with open_database(settings) as session_factory:
            return run_command(args.command, args.args, session_factory)
    except Exception as exc:
        print(render_error(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
