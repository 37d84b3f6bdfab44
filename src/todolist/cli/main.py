# src/todolist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (backend fallback chain included),
then runs the console REPL until /exit or EOF.
"""

from __future__ import annotations

import logging

from .bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    try:
        setup_logging(
            log_dir=settings.log_dir, app_name=settings.app_name, console_level=console_level
        )
    except OSError:
        # Unwritable log dir: keep going with console-only logging.
        logging.basicConfig(level=console_level)
        logger.warning("Could not create log dir %s; file logging disabled.", settings.log_dir)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
