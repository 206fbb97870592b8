# src/taskui/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures local (gitignored) directories exist,
- opens the SQLite TaskStore,
- builds the AppController from the initial snapshot.

Both steps raise StorageError on failure; the caller treats that as fatal.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from ..config import get_settings
from ..core.controller import AppController
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(*, settings=None) -> TaskStore:
    """
    Open the task store described by settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    try:
        _ensure_local_dirs(settings)
    except OSError:
        # TaskStore reports the same problem as a StorageError below.
        logger.debug("Could not create local dirs", exc_info=True)

    return TaskStore(
        settings.tasks_db_path,
        visible_window=timedelta(hours=settings.visible_hours),
    )


def create_controller(store: TaskStore, *, settings=None) -> AppController:
    if settings is None:
        settings = get_settings()
    return AppController(store, input_char_limit=settings.input_char_limit)
