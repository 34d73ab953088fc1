from __future__ import annotations

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from weekplanner.state import DEFAULT_DURATION

DIALOG_CSS = """
{name} {{
    align: center middle;
    background: $background 60%;
}}

{name} > Vertical {{
    width: 56;
    height: auto;
    border: round #3b4a58;
    background: $surface;
    padding: 1 2;
}}

{name} .dialog-title {{
    text-style: bold;
    margin-bottom: 1;
}}

{name} Input {{
    margin-bottom: 1;
}}

{name} .buttons {{
    height: auto;
    align-horizontal: right;
}}

{name} Button {{
    margin-left: 1;
}}
"""


@dataclass(frozen=True)
class TaskFormResult:
    title: str
    time: str
    duration: str


class TaskFormScreen(ModalScreen[TaskFormResult | None]):
    """Entry form for a new task. Dismisses with the values or None."""

    CSS = DIALOG_CSS.format(name="TaskFormScreen")

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, day_label: str) -> None:
        super().__init__()
        self._day_label = day_label

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(f"{self._day_label} に予定を追加", classes="dialog-title")
            yield Input(placeholder="Title", id="task-title")
            yield Input(placeholder="HH:MM", id="task-time")
            yield Input(value=DEFAULT_DURATION, placeholder="Minutes", id="task-duration")
            with Horizontal(classes="buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Add", variant="primary", id="submit")

    def on_mount(self) -> None:
        self.query_one("#task-title", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "submit":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        self.dismiss(
            TaskFormResult(
                title=self.query_one("#task-title", Input).value,
                time=self.query_one("#task-time", Input).value.strip(),
                duration=self.query_one("#task-duration", Input).value.strip(),
            )
        )


class ConfirmScreen(ModalScreen[bool]):
    CSS = DIALOG_CSS.format(name="ConfirmScreen")

    BINDINGS = [
        ("y", "confirm", "Yes"),
        ("n", "cancel", "No"),
        ("escape", "cancel", "No"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self._message, classes="dialog-title")
            with Horizontal(classes="buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Delete", variant="error", id="confirm")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "confirm")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
