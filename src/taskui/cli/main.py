# src/taskui/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the store, loads the initial snapshot and runs the
Textual app. Exit codes: 0 on quit, 1 when logging, the store or the initial
snapshot cannot be set up, or when the app stops on an unhandled error.
"""

from __future__ import annotations

import logging
import sys

from ..config import get_settings
from ..core.ports import StorageError
from ..logging_setup import setup_logging
from .bootstrap import create_controller, create_store

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STARTUP_FAILED = 1
EXIT_APP_FAILED = 1


def run(settings) -> int:
    try:
        store = create_store(settings=settings)
        controller = create_controller(store, settings=settings)
    except StorageError as e:
        logger.exception("Startup failed: cannot load tasks.")
        print(f"Error in DB connection: {e}", file=sys.stderr)
        return EXIT_STARTUP_FAILED

    from ..tui.app import TaskApp

    app = TaskApp(controller)
    app.title = settings.app_name
    try:
        app.run()
    finally:
        store.close()

    # Textual sets a non-zero return code when the app dies on an unhandled error.
    code = app.return_code or EXIT_OK
    if code != EXIT_OK:
        logger.error("App stopped with return code %s", code)
        print("Alas, there's been an error: the app stopped unexpectedly.", file=sys.stderr)
    logger.info("Bye.")
    return code


def main(settings=None) -> int:
    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    try:
        setup_logging(
            log_dir=settings.log_dir,
            console=settings.log_to_console,
            console_level=console_level,
        )
    except OSError as e:
        print(f"Error setting up logging in {settings.log_dir}: {e}", file=sys.stderr)
        return EXIT_STARTUP_FAILED

    logger.info("Starting %s...", settings.app_name)
    return run(settings)


if __name__ == "__main__":
    raise SystemExit(main())
