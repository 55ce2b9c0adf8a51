# src/zap_tasks/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState for the account given with -u, then
reorders (and optionally decomposes) the configured target lists.

Exit code 1 only for setup errors; per-list failures are logged and the
run still exits 0.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..cli.display import format_report, print_updated_lists
from ..config import get_settings
from ..errors import SetupError
from ..logging_setup import setup_logging
from ..tasks.workflow import run_workflow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zap-tasks",
        description="Prioritize Google Tasks lists with Gemini.",
    )
    parser.add_argument("-u", "--user", required=True, help="User email to impersonate.")
    return parser


def main(argv: list[str] | None = None, *, settings=None) -> int:
    args = build_parser().parse_args(argv)

    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logger.debug("Full log: %s", log_file)

    logger.info("Starting %s for %s...", settings.app_name, args.user)

    try:
        state = create_initial_state(args.user, settings=settings)
    except SetupError as e:
        logger.error("%s", e)
        return 1

    target_lists = list(settings.target_lists)
    print(f"Analyzing and prioritizing tasks in lists: {target_lists}")

    try:
        report = run_workflow(
            state.task_store,
            state.llm,
            target_lists,
            decompose=settings.generate_subtasks,
            move_delay_seconds=settings.move_delay_seconds,
        )
        print(format_report(report))
        print_updated_lists(state.task_store, report)
    finally:
        close = getattr(state.llm, "close", None)
        if callable(close):
            close()

    if report.failed:
        logger.warning("%d of %d lists failed", len(report.failed), len(report.outcomes))
    else:
        print("\nTask prioritization completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
