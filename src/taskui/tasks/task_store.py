# src/taskui/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from datetime import timedelta
from pathlib import Path

from ..core.ports import Clock, StorageError, utc_now
from .task_models import Task, format_ts, parse_ts

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_WINDOW = timedelta(hours=24)

_COLUMNS = "id, name, due_date, completed, created_at, updated_at"

# Older rows may use "T" between date and time; compare them in the on-disk form.
_CREATED_KEY = "replace(created_at, 'T', ' ')"


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Unlike a best-effort cache, a schema that cannot be created is fatal:
    the constructor raises StorageError.

    Visibility:
    - completed tasks created more than `visible_window` ago are hidden
      from list_visible() but stay in the table (see list_all()).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(
        self,
        db_path: str | Path = "taskui.db",
        *,
        clock: Clock = utc_now,
        visible_window: timedelta = DEFAULT_VISIBLE_WINDOW,
    ) -> None:
        self._db_path = Path(db_path)
        self._clock = clock
        self._visible_window = visible_window
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"cannot create directory for {self._db_path}: {e}") from e
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    def close(self) -> None:
        """Shutdown hook (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self._db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER NOT NULL PRIMARY KEY,
                    name TEXT NOT NULL,
                    due_date TEXT NOT NULL DEFAULT '',
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("due_date", "TEXT NOT NULL DEFAULT ''")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "TEXT NOT NULL DEFAULT ''")
            add_col("updated_at", "TEXT NOT NULL DEFAULT ''")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_completed_created "
                "ON tasks(completed, created_at)"
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"cannot create schema in {self._db_path}: {e}") from e
        finally:
            conn.close()

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        try:
            created_at = parse_ts(row["created_at"])
        except ValueError:
            logger.warning("Task id=%s has bad created_at=%r", row["id"], row["created_at"])
            created_at = self._clock()
        try:
            updated_at = parse_ts(row["updated_at"])
        except ValueError:
            updated_at = created_at
        return Task(
            id=int(row["id"]),
            name=str(row["name"] or ""),
            due_date=str(row["due_date"] or ""),
            completed=bool(row["completed"]),
            created_at=created_at,
            updated_at=max(updated_at, created_at),
        )

    def _next_id(self, cur: sqlite3.Cursor) -> int:
        """
        Millisecond wall-clock id, bumped past the current maximum.

        Two creations inside the same millisecond (or with a frozen clock)
        still get distinct ids.
        """
        cur.execute("SELECT MAX(id) FROM tasks")
        (max_id,) = cur.fetchone()
        candidate = int(self._clock().timestamp() * 1000)
        if max_id is not None and candidate <= int(max_id):
            candidate = int(max_id) + 1
        return candidate

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        except sqlite3.Error as e:
            raise StorageError(f"count failed: {e}") from e
        finally:
            conn.close()

    def list_visible(self) -> list[Task]:
        """
        Return the tasks the user should see, newest first.

        A task is hidden only if it is completed AND was created before
        now - visible_window. Hidden rows are kept in the table.
        """
        cutoff = format_ts(self._clock() - self._visible_window)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM tasks
                WHERE NOT (completed = 1 AND {_CREATED_KEY} < ?)
                ORDER BY {_CREATED_KEY} DESC, id DESC
                """,
                (cutoff,),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise StorageError(f"list failed: {e}") from e
        finally:
            conn.close()

    def list_all(self) -> list[Task]:
        """All rows, including completed tasks past the visibility window."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT {_COLUMNS} FROM tasks ORDER BY {_CREATED_KEY} DESC, id DESC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise StorageError(f"list failed: {e}") from e
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        except sqlite3.Error as e:
            raise StorageError(f"get failed id={task_id}: {e}") from e
        finally:
            conn.close()

    def save(self, task: Task) -> Task:
        """
        Create or update a task (single upsert keyed on id).

        - task.id == NEW_TASK_ID: a fresh id is assigned, created_at = updated_at = now
        - existing id: name, due_date, completed and updated_at are overwritten;
          created_at is preserved
        """
        name = (task.name or "").strip()
        if not name:
            raise ValueError("name is required")

        now = self._clock()
        now_s = format_ts(now)

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if task.is_new:
                task_id = self._next_id(cur)
                created_s = now_s
            else:
                task_id = int(task.id)
                created_s = format_ts(min(task.created_at, now))

            cur.execute(
                """
                INSERT INTO tasks (id, name, due_date, completed, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    due_date = excluded.due_date,
                    completed = excluded.completed,
                    updated_at = excluded.updated_at
                """,
                (task_id, name, task.due_date or "", int(bool(task.completed)), created_s, now_s),
            )
            conn.commit()

            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (task_id,))
            row = cur.fetchone()
            if row is None:
                raise StorageError(f"task id={task_id} missing right after save")
            logger.debug("Task saved id=%s new=%s", task_id, task.is_new)
            return self._row_to_task(row)
        except sqlite3.Error as e:
            raise StorageError(f"save failed id={task.id}: {e}") from e
        finally:
            conn.close()

    def delete(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            logger.debug("Task delete id=%s removed=%s", task_id, cur.rowcount)
        except sqlite3.Error as e:
            raise StorageError(f"delete failed id={task_id}: {e}") from e
        finally:
            conn.close()

    def set_completion(self, task_id: int, completed: bool) -> None:
        now_s = format_ts(self._clock())
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "UPDATE tasks SET completed = ?, updated_at = ? WHERE id = ?",
                (int(bool(completed)), now_s, int(task_id)),
            )
            conn.commit()
            logger.debug(
                "Task completion id=%s completed=%s updated=%s", task_id, completed, cur.rowcount
            )
        except sqlite3.Error as e:
            raise StorageError(f"set_completion failed id={task_id}: {e}") from e
        finally:
            conn.close()
