# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskui.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskui-test",
        log_level="DEBUG",
        log_to_console=False,
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "taskui.db",
        log_dir=tmp_path / "logs",
        input_char_limit=156,
        visible_hours=24,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(tmp_path: Path, clock: FakeClock) -> TaskStore:
    """Real SQLite store on a temp file, driven by the fake clock."""
    return TaskStore(tmp_path / "tasks.db", clock=clock)


@pytest.fixture()
def repo(clock: FakeClock) -> FakeTaskRepo:
    return FakeTaskRepo(clock=clock)
