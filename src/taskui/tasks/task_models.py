# src/taskui/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime

NEW_TASK_ID = 0
# Sentinel id for a task that has not been persisted yet.

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
_LEGACY_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S.%f")


def format_ts(dt: datetime) -> str:
    """Render a timestamp in the fixed-width, sortable UTC text form used on disk."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.strftime(TIMESTAMP_FORMAT)


def parse_ts(raw: str | None) -> datetime:
    """
    Parse a stored timestamp back into an aware UTC datetime.

    Rows written by older versions use second precision ("2024-01-31 09:15:00");
    both forms are accepted.
    """
    if not raw:
        raise ValueError("empty timestamp")
    text = str(raw).strip()
    for fmt in (TIMESTAMP_FORMAT, *_LEGACY_FORMATS):
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    raise ValueError(f"unrecognized timestamp: {raw!r}")


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    name: str
    due_date: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    @property
    def is_new(self) -> bool:
        return self.id == NEW_TASK_ID

    @classmethod
    def new(cls, name: str, *, now: datetime, due_date: str = "") -> Task:
        return cls(
            id=NEW_TASK_ID,
            name=name,
            due_date=due_date,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    def renamed(self, name: str, *, now: datetime) -> Task:
        """Copy with a new name; id, due date, completion and creation time are kept."""
        return replace(self, name=name, updated_at=now)
