# src/taskui/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on the TaskRepo Protocol instead of the SQLite store,
so tests can hand it an in-memory fake.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from ..tasks.task_models import Task

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class StorageError(Exception):
    """A store operation failed (connection, query or write)."""


class TaskRepo(Protocol):
    def list_visible(self) -> list[Task]: ...
    def save(self, task: Task) -> Task: ...
    def delete(self, task_id: int) -> None: ...
    def set_completion(self, task_id: int, completed: bool) -> None: ...
