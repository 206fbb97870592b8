# src/taskui/core/controller.py

"""
Application state machine.

The controller owns the transient UI state (active view, cursor, input field)
and the in-memory snapshot of visible tasks. It interprets one Intent at a
time, talks to the TaskRepo, and re-reads the full snapshot after every
successful mutation instead of patching it locally.

Transitions live in a single table keyed by (View, Action). Pairs missing
from the table are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..tasks.task_models import Task
from .intents import Action, Intent, View
from .ports import Clock, StorageError, TaskRepo, utc_now
from .text_input import DEFAULT_CHAR_LIMIT, TextInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ViewModel:
    """Read-only snapshot handed to the renderer each cycle."""

    active_view: View
    visible_tasks: tuple[Task, ...]
    cursor: int | None
    input_buffer: str
    input_caret: int
    input_visible: bool
    status: str | None = None


Handler = Callable[["AppController", Intent], None]


class AppController:
    def __init__(
        self,
        repo: TaskRepo,
        *,
        clock: Clock = utc_now,
        input_char_limit: int = DEFAULT_CHAR_LIMIT,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self.input = TextInput(input_char_limit)
        self.view = View.LIST
        self.finished = False
        self.status: str | None = None

        # No safe initial state without a snapshot: StorageError propagates.
        self.tasks: list[Task] = list(repo.list_visible())
        self.cursor: int | None = 0 if self.tasks else None
        logger.info("Controller started with %d visible task(s)", len(self.tasks))

    # ---- public API ----

    def handle(self, intent: Intent) -> None:
        if self.finished:
            return
        self.status = None

        if self.view.takes_text:
            resolved = self._in_text_view(intent)
            if resolved is None:
                return
            intent = resolved

        handler = _TRANSITIONS.get((self.view, intent.action))
        if handler is None:
            logger.debug("Ignored %s in %s view", intent.action, self.view)
            return
        handler(self, intent)

    def view_model(self) -> ViewModel:
        return ViewModel(
            active_view=self.view,
            visible_tasks=tuple(self.tasks),
            cursor=self.cursor,
            input_buffer=self.input.value,
            input_caret=self.input.caret,
            input_visible=self.view.takes_text,
            status=self.status,
        )

    @property
    def selected(self) -> Task | None:
        if self.cursor is None or not (0 <= self.cursor < len(self.tasks)):
            return None
        return self.tasks[self.cursor]

    # ---- helpers ----

    @staticmethod
    def _in_text_view(intent: Intent) -> Intent | None:
        """
        Reinterpret an intent while the input field has focus.

        Only ESCAPE, CONFIRM and a character-less QUIT (ctrl+c) stay commands;
        anything that carries a printable character is typed into the field.
        """
        if intent.action in (Action.ESCAPE, Action.CONFIRM):
            return intent
        if intent.action is Action.QUIT and not intent.text:
            return intent
        return intent.as_text()

    def _refresh(self) -> bool:
        """Replace the snapshot with a fresh read and clamp the cursor."""
        try:
            tasks = self._repo.list_visible()
        except StorageError as e:
            self._report("Could not reload tasks", e)
            return False
        self.tasks = list(tasks)
        self._clamp_cursor()
        return True

    def _clamp_cursor(self) -> None:
        if not self.tasks:
            self.cursor = None
        elif self.cursor is None:
            self.cursor = 0
        elif self.cursor >= len(self.tasks):
            self.cursor = len(self.tasks) - 1

    def _back_to_list(self) -> None:
        self.input.reset()
        self.view = View.LIST
        self._clamp_cursor()

    def _report(self, what: str, exc: StorageError) -> None:
        logger.warning("%s: %s", what, exc, exc_info=True)
        self.status = f"{what}."

    # ---- transitions ----

    def _quit(self, intent: Intent) -> None:
        logger.info("Quit requested from %s view", self.view)
        self.finished = True

    def _cancel_input(self, intent: Intent) -> None:
        self._back_to_list()

    def _enter_add(self, intent: Intent) -> None:
        self.input.reset()
        self.view = View.ADD

    def _enter_edit(self, intent: Intent) -> None:
        task = self.selected
        if task is None:
            return
        self.input.set_value(task.name)
        self.view = View.EDIT

    def _delete_selected(self, intent: Intent) -> None:
        task = self.selected
        if task is None:
            return
        try:
            self._repo.delete(task.id)
        except StorageError as e:
            self._report("Could not delete task", e)
            return
        self._refresh()

    def _move_up(self, intent: Intent) -> None:
        if self.cursor is not None and self.cursor > 0:
            self.cursor -= 1

    def _move_down(self, intent: Intent) -> None:
        if self.cursor is not None and self.cursor < len(self.tasks) - 1:
            self.cursor += 1

    def _toggle_selected(self, intent: Intent) -> None:
        task = self.selected
        if task is None:
            return
        try:
            self._repo.set_completion(task.id, not task.completed)
        except StorageError as e:
            self._report("Could not update task", e)
            return
        self._refresh()

    def _confirm_add(self, intent: Intent) -> None:
        name = self.input.value.strip()
        if not name:
            return
        try:
            self._repo.save(Task.new(name, now=self._clock()))
        except StorageError as e:
            self._report("Could not save task", e)
            return
        # Newest task sorts first.
        self.cursor = 0
        self._refresh()
        self._back_to_list()

    def _confirm_edit(self, intent: Intent) -> None:
        name = self.input.value.strip()
        task = self.selected
        if not name or task is None:
            return
        try:
            self._repo.save(task.renamed(name, now=self._clock()))
        except StorageError as e:
            self._report("Could not save task", e)
            return
        self._refresh()
        self._back_to_list()

    def _edit_text(self, intent: Intent) -> None:
        if intent.edit is None:
            return
        self.input.apply(intent.edit, intent.text)


_TRANSITIONS: dict[tuple[View, Action], Handler] = {
    (View.LIST, Action.QUIT): AppController._quit,
    (View.ADD, Action.QUIT): AppController._quit,
    (View.EDIT, Action.QUIT): AppController._quit,
    (View.ADD, Action.ESCAPE): AppController._cancel_input,
    (View.EDIT, Action.ESCAPE): AppController._cancel_input,
    (View.LIST, Action.ADD): AppController._enter_add,
    (View.LIST, Action.EDIT): AppController._enter_edit,
    (View.LIST, Action.DELETE): AppController._delete_selected,
    (View.LIST, Action.UP): AppController._move_up,
    (View.LIST, Action.DOWN): AppController._move_down,
    (View.LIST, Action.CONFIRM): AppController._toggle_selected,
    (View.ADD, Action.CONFIRM): AppController._confirm_add,
    (View.EDIT, Action.CONFIRM): AppController._confirm_edit,
    (View.ADD, Action.TEXT): AppController._edit_text,
    (View.EDIT, Action.TEXT): AppController._edit_text,
}
