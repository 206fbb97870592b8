# src/taskui/tui/app.py

"""
Textual front end.

Owns no task state: every key is resolved to an Intent, handed to the
controller, and the screen is redrawn from controller.view_model().
"""

from __future__ import annotations

import logging

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from ..cli.keymap import DEFAULT_KEYMAP, KeyMap
from ..core.controller import AppController, ViewModel
from ..core.intents import Action, Intent, View

logger = logging.getLogger(__name__)

ACCENT = "#36b8ff"
MUTED = "#666666"

GREETING = r"""  _____  _    ____  _  ___   _ ___
 |_   _|/ \  / ___|| |/ / | | |_ _|
   | | / _ \ \___ \| ' /| | | || |
   | |/ ___ \ ___) | . \| |_| || |
   |_/_/   \_\____/|_|\_\\___/|___|
"""

EMPTY_MESSAGE = (
    "Nothing on your plate yet!\n\n"
    "Your task list is as empty as a zen garden.\n\n"
    "Press 'a' to add your first task."
)


def render_input(vm: ViewModel) -> Text:
    label = "New task: " if vm.active_view is View.ADD else "Edit task: "
    out = Text(label, style=f"bold {ACCENT}")
    value = vm.input_buffer
    caret = min(vm.input_caret, len(value))
    out.append(value[:caret])
    out.append(value[caret : caret + 1] or " ", style="reverse")
    out.append(value[caret + 1 :])
    return out


def render_tasks(vm: ViewModel) -> Text:
    if not vm.visible_tasks:
        return Text(EMPTY_MESSAGE, style=f"italic {MUTED}", justify="center")

    out = Text()
    for idx, task in enumerate(vm.visible_tasks):
        marker = ">" if vm.cursor == idx else " "
        checkbox = "[✓]" if task.completed else "[ ]"
        body_style = "strike" if task.completed else ""

        out.append(f"  {marker} ", style=ACCENT)
        out.append(checkbox, style=ACCENT)
        out.append(f" {idx + 1}. ")
        out.append(task.name, style=body_style)
        if task.due_date:
            out.append(f"  {task.due_date}", style=body_style or MUTED)
        out.append("\n\n")
    return out


class TaskApp(App[int]):
    """Full-screen task list driven by an AppController."""

    TITLE = "taskui"
    ENABLE_COMMAND_PALETTE = False

    # ctrl+c would otherwise be taken by Textual's own handling.
    BINDINGS = [Binding("ctrl+c", "quit_requested", show=False, priority=True)]

    CSS = """
    Screen { padding: 1 2; }
    #greeting { color: #36b8ff; }
    #input { border: round #36b8ff; padding: 0 1; }
    #heading { text-style: bold; color: #36b8ff; margin-top: 1; }
    #status { color: red; }
    #help { color: #666666; }
    """

    def __init__(self, controller: AppController, *, keymap: KeyMap = DEFAULT_KEYMAP) -> None:
        super().__init__()
        self.controller = controller
        self.keymap = keymap

    def compose(self) -> ComposeResult:
        yield Static(GREETING, id="greeting")
        yield Static(id="input")
        yield Static("Tasks", id="heading")
        yield Static(id="tasks")
        yield Static(id="status")
        yield Static("Help: " + self.keymap.short_help(), id="help")

    def on_mount(self) -> None:
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        intent = self.keymap.resolve(event.key, event.character)
        if intent is None:
            return
        event.stop()
        event.prevent_default()
        self.dispatch_intent(intent)

    def action_quit_requested(self) -> None:
        self.dispatch_intent(Intent(Action.QUIT))

    def dispatch_intent(self, intent: Intent) -> None:
        self.controller.handle(intent)
        if self.controller.finished:
            self.exit(0)
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        vm = self.controller.view_model()

        input_box = self.query_one("#input", Static)
        input_box.display = vm.input_visible
        if vm.input_visible:
            input_box.update(render_input(vm))

        self.query_one("#tasks", Static).update(render_tasks(vm))

        status = self.query_one("#status", Static)
        status.display = bool(vm.status)
        status.update(vm.status or "")
