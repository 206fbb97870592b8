# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from taskui.core.ports import StorageError
from taskui.tasks.task_models import NEW_TASK_ID, Task, format_ts, parse_ts
from taskui.tasks.task_store import TaskStore

from .fakes import FakeClock


def _new(store: TaskStore, clock: FakeClock, name: str) -> Task:
    return store.save(Task.new(name, now=clock()))


def test_save_new_task_assigns_id_and_timestamps(store: TaskStore, clock: FakeClock) -> None:
    assert Task.new("Buy milk", now=clock()).is_new
    task = _new(store, clock, "Buy milk")

    assert task.id != NEW_TASK_ID
    assert not task.is_new
    assert task.name == "Buy milk"
    assert task.due_date == ""
    assert task.completed is False
    assert task.created_at == clock.now
    assert task.updated_at == clock.now
    assert store.count_tasks() == 1


def test_list_visible_orders_newest_first(store: TaskStore, clock: FakeClock) -> None:
    first = _new(store, clock, "first")
    clock.advance(minutes=1)
    second = _new(store, clock, "second")
    clock.advance(minutes=1)
    third = _new(store, clock, "third")

    assert [t.id for t in store.list_visible()] == [third.id, second.id, first.id]


def test_visibility_hides_only_old_completed_tasks(store: TaskStore, clock: FakeClock) -> None:
    old_done = _new(store, clock, "old done")
    old_open = _new(store, clock, "old open")
    store.set_completion(old_done.id, True)

    clock.advance(hours=25)
    recent_done = _new(store, clock, "recent done")
    store.set_completion(recent_done.id, True)
    recent_open = _new(store, clock, "recent open")

    visible = {t.id for t in store.list_visible()}
    assert visible == {old_open.id, recent_done.id, recent_open.id}

    # The visibility invariant, checked over every stored row.
    cutoff = clock.now - timedelta(hours=24)
    for t in store.list_all():
        hidden = t.completed and t.created_at < cutoff
        assert (t.id in visible) is (not hidden)


def test_old_completed_task_is_retained_in_storage(store: TaskStore, clock: FakeClock) -> None:
    task = _new(store, clock, "Buy milk")
    store.set_completion(task.id, True)

    clock.advance(hours=25)

    assert store.list_visible() == []
    assert [t.id for t in store.list_all()] == [task.id]

    store.delete(task.id)
    assert store.list_all() == []


def test_visibility_boundary_is_exclusive(store: TaskStore, clock: FakeClock) -> None:
    task = _new(store, clock, "edge")
    store.set_completion(task.id, True)

    clock.advance(hours=24)
    assert [t.id for t in store.list_visible()] == [task.id]

    clock.advance(seconds=1)
    assert store.list_visible() == []


def test_upsert_same_id_keeps_one_row_and_advances_updated_at(
    store: TaskStore, clock: FakeClock
) -> None:
    created = _new(store, clock, "Buy milk")

    clock.advance(seconds=5)
    again = store.save(created)
    clock.advance(seconds=5)
    third = store.save(created)

    assert store.count_tasks() == 1
    assert again.id == third.id == created.id
    assert again.created_at == third.created_at == created.created_at
    assert created.updated_at < again.updated_at < third.updated_at
    assert third.name == "Buy milk"


def test_update_never_changes_id_or_created_at(store: TaskStore, clock: FakeClock) -> None:
    created = _new(store, clock, "Buy milk")
    clock.advance(hours=2)

    tampered = replace(
        created,
        name="Buy oat milk",
        due_date="friday",
        completed=True,
        created_at=datetime(2001, 1, 1, tzinfo=UTC),
    )
    saved = store.save(tampered)

    assert saved.id == created.id
    assert saved.created_at == created.created_at
    assert saved.name == "Buy oat milk"
    assert saved.due_date == "friday"
    assert saved.completed is True
    assert saved.updated_at == clock.now


def test_save_rejects_empty_name(store: TaskStore, clock: FakeClock) -> None:
    with pytest.raises(ValueError):
        store.save(Task.new("", now=clock()))
    with pytest.raises(ValueError):
        store.save(Task.new("   ", now=clock()))
    assert store.count_tasks() == 0


def test_new_ids_are_unique_with_a_frozen_clock(store: TaskStore, clock: FakeClock) -> None:
    a = _new(store, clock, "a")
    b = _new(store, clock, "b")
    c = _new(store, clock, "c")

    assert len({a.id, b.id, c.id}) == 3
    assert a.id < b.id < c.id
    assert store.count_tasks() == 3


def test_new_id_is_derived_from_wall_clock(store: TaskStore, clock: FakeClock) -> None:
    task = _new(store, clock, "a")
    assert task.id == int(clock.now.timestamp() * 1000)


def test_set_completion_touches_only_completion_and_updated_at(
    store: TaskStore, clock: FakeClock
) -> None:
    created = store.save(Task.new("Buy milk", now=clock(), due_date="tomorrow"))
    clock.advance(minutes=3)

    store.set_completion(created.id, True)
    got = store.get_task(created.id)

    assert got is not None
    assert got.completed is True
    assert got.name == "Buy milk"
    assert got.due_date == "tomorrow"
    assert got.created_at == created.created_at
    assert got.updated_at == clock.now

    store.set_completion(created.id, False)
    assert store.get_task(created.id).completed is False


def test_delete_and_toggle_unknown_id_are_noops(store: TaskStore, clock: FakeClock) -> None:
    task = _new(store, clock, "keep me")

    store.delete(424242)
    store.set_completion(424242, True)

    assert [t.id for t in store.list_all()] == [task.id]
    assert store.get_task(424242) is None


def test_delete_removes_regardless_of_state(store: TaskStore, clock: FakeClock) -> None:
    open_task = _new(store, clock, "open")
    done_task = _new(store, clock, "done")
    store.set_completion(done_task.id, True)

    store.delete(open_task.id)
    store.delete(done_task.id)

    assert store.count_tasks() == 0


def test_schema_is_created_idempotently(tmp_path: Path, clock: FakeClock) -> None:
    db = tmp_path / "tasks.db"
    first = TaskStore(db, clock=clock)
    first.save(Task.new("persisted", now=clock()))

    reopened = TaskStore(db, clock=clock)
    assert [t.name for t in reopened.list_visible()] == ["persisted"]


def test_store_init_fails_fast_when_db_cannot_be_opened(tmp_path: Path) -> None:
    as_dir = tmp_path / "not-a-file.db"
    as_dir.mkdir()

    with pytest.raises(StorageError):
        TaskStore(as_dir)


def test_store_init_fails_fast_on_corrupt_file(tmp_path: Path) -> None:
    db = tmp_path / "garbage.db"
    db.write_bytes(b"this is definitely not an sqlite database" * 100)

    with pytest.raises(StorageError):
        TaskStore(db)


def test_query_failures_surface_as_storage_error(tmp_path: Path, clock: FakeClock) -> None:
    db = tmp_path / "tasks.db"
    store = TaskStore(db, clock=clock)

    conn = sqlite3.connect(db)
    conn.execute("DROP TABLE tasks")
    conn.commit()
    conn.close()

    with pytest.raises(StorageError):
        store.list_visible()
    with pytest.raises(StorageError):
        store.save(Task.new("x", now=clock()))
    with pytest.raises(StorageError):
        store.delete(1)
    with pytest.raises(StorageError):
        store.set_completion(1, True)


def test_reads_rows_written_with_legacy_schema(tmp_path: Path) -> None:
    db = tmp_path / "taskui.db"
    conn = sqlite3.connect(db)
    conn.execute(
        """
        CREATE TABLE tasks (
            id integer not null primary key,
            name text not null,
            due_date text,
            completed integer default 0,
            created_at datetime default CURRENT_TIMESTAMP,
            updated_at datetime default CURRENT_TIMESTAMP
        )
        """
    )
    conn.execute(
        "INSERT INTO tasks VALUES (?, ?, ?, ?, ?, ?)",
        (1714560000, "legacy", None, 0, "2024-05-01 11:00:00", "2024-05-01 11:30:00"),
    )
    conn.commit()
    conn.close()

    store = TaskStore(db, clock=FakeClock())
    (task,) = store.list_visible()

    assert task.id == 1714560000
    assert task.name == "legacy"
    assert task.due_date == ""
    assert task.created_at == datetime(2024, 5, 1, 11, 0, 0, tzinfo=UTC)
    assert task.updated_at == datetime(2024, 5, 1, 11, 30, 0, tzinfo=UTC)


def test_timestamp_text_round_trip_sorts_chronologically() -> None:
    early = datetime(2024, 5, 1, 9, 0, 0, 5, tzinfo=UTC)
    late = datetime(2024, 5, 1, 10, 0, 0, tzinfo=UTC)

    assert format_ts(early) < format_ts(late)
    assert parse_ts(format_ts(early)) == early
    with pytest.raises(ValueError):
        parse_ts("yesterday")


def test_iso_t_timestamps_follow_visibility_and_order(tmp_path: Path) -> None:
    clock = FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC))
    db = tmp_path / "tasks.db"
    store = TaskStore(db, clock=clock)

    conn = sqlite3.connect(db)
    conn.executemany(
        "INSERT INTO tasks VALUES (?, ?, ?, ?, ?, ?)",
        [
            (1, "old done", "", 1, "2024-04-30T11:00:00", "2024-04-30T11:00:00"),
            (2, "old open", "", 0, "2024-04-30T10:00:00", "2024-04-30T10:00:00"),
            (3, "fresh", "", 0, "2024-05-01 09:00:00.000000", "2024-05-01 09:00:00.000000"),
            (4, "between", "", 0, "2024-05-01T08:00:00", "2024-05-01T08:00:00"),
        ],
    )
    conn.commit()
    conn.close()

    assert [t.id for t in store.list_visible()] == [3, 4, 2]
    assert [t.id for t in store.list_all()] == [3, 4, 1, 2]
