from __future__ import annotations

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Footer, Label, ListItem, ListView, ProgressBar, Static

from weekplanner.planner import DELETE_PROMPT, PlannerController
from weekplanner.render import DayItem, PlannerView, TaskRow
from weekplanner.state import DAY_COUNT, Theme
from weekplanner.tui.dialogs import ConfirmScreen, TaskFormResult, TaskFormScreen


class DayButton(Static):
    def __init__(self, day: DayItem) -> None:
        super().__init__(f" {day.label} ", classes="day-item -active" if day.active else "day-item")
        self.day_index = day.index

    def on_click(self, event: events.Click) -> None:
        event.stop()
        screen = self.screen
        if isinstance(screen, PlannerScreen):
            screen.action_select_day(self.day_index)


class PlannerScreen(Screen):
    CSS = """
    PlannerScreen {
        background: #0f1418;
        color: #d9e2ec;
    }

    PlannerScreen.-light {
        background: #f4f1ea;
        color: #1f2933;
    }

    #header {
        height: 3;
        padding: 1 2 0 2;
    }

    #day-label {
        width: 1fr;
        text-style: bold;
    }

    #theme-icon {
        width: 3;
    }

    #day-selector {
        height: 3;
        padding: 0 2;
    }

    .day-item {
        width: 5;
        height: 3;
        content-align: center middle;
        border: round #3b4a58;
        margin-right: 1;
    }

    .day-item.-active {
        border: round #f0b429;
        text-style: bold;
    }

    #tasks-pane {
        border: round #3b4a58;
        margin: 1 2;
        padding: 0 1;
        height: 1fr;
    }

    #task-list {
        height: 1fr;
    }

    .task-row.-completed {
        text-style: strike;
        color: #829ab1;
    }

    .empty-state {
        color: #829ab1;
        text-style: italic;
    }

    #progress {
        height: 2;
        padding: 0 2;
    }

    #progress-text {
        margin-left: 2;
    }
    """

    BINDINGS = [
        Binding("a", "add_task", "Add"),
        Binding("space", "toggle_task", "Done"),
        Binding("d", "delete_task", "Delete"),
        Binding("delete", "delete_task", "Delete", show=False),
        Binding("t", "toggle_theme", "Theme"),
        Binding("left", "shift_day(-1)", "Prev day"),
        Binding("right", "shift_day(1)", "Next day"),
        Binding("1", "select_day(0)", show=False),
        Binding("2", "select_day(1)", show=False),
        Binding("3", "select_day(2)", show=False),
        Binding("4", "select_day(3)", show=False),
        Binding("5", "select_day(4)", show=False),
        Binding("6", "select_day(5)", show=False),
        Binding("7", "select_day(6)", show=False),
        Binding("q", "app.quit", "Quit"),
    ]

    def __init__(self, controller: PlannerController) -> None:
        super().__init__()
        self._controller = controller
        self._rows: tuple[TaskRow, ...] = ()

    def compose(self) -> ComposeResult:
        with Horizontal(id="header"):
            yield Static(id="day-label")
            yield Static(id="theme-icon")
        yield Horizontal(id="day-selector")
        yield Container(ListView(id="task-list"), id="tasks-pane")
        with Horizontal(id="progress"):
            yield ProgressBar(total=100, show_eta=False, show_percentage=False, id="progress-bar")
            yield Label(id="progress-text")
        yield Footer()

    def on_mount(self) -> None:
        self._controller.subscribe(self._schedule_render)
        self._schedule_render(self._controller.view())
        self.query_one("#task-list", ListView).focus()

    def on_unmount(self) -> None:
        self._controller.unsubscribe(self._schedule_render)

    def action_add_task(self) -> None:
        self.app.push_screen(TaskFormScreen(self._controller.view().day_label), self._on_task_form)

    def action_toggle_task(self) -> None:
        row = self._selected_row()
        if row is not None:
            self._controller.toggle_task(row.index)

    def action_delete_task(self) -> None:
        row = self._selected_row()
        if row is None:
            return

        def on_confirm(confirmed: bool | None) -> None:
            if not confirmed:
                return
            # The list may have changed while the dialog was open.
            index = self._controller.index_of(row.task_id)
            if index is not None:
                self._controller.remove_task(index)

        self.app.push_screen(ConfirmScreen(DELETE_PROMPT), on_confirm)

    def action_toggle_theme(self) -> None:
        self._controller.toggle_theme()

    def action_select_day(self, index: int) -> None:
        self._controller.select_day(index)

    def action_shift_day(self, delta: int) -> None:
        self._controller.select_day((self._controller.state.current_day + delta) % DAY_COUNT)

    def _on_task_form(self, result: TaskFormResult | None) -> None:
        if result is None:
            return
        self._controller.add_task(result.title, result.time, result.duration)

    def _selected_row(self) -> TaskRow | None:
        index = self.query_one("#task-list", ListView).index
        if index is None or not 0 <= index < len(self._rows):
            return None
        return self._rows[index]

    def _schedule_render(self, view: PlannerView) -> None:
        self.call_later(self._render_view, view)

    async def _render_view(self, view: PlannerView) -> None:
        self.set_class(view.theme.theme == Theme.LIGHT, "-light")
        self.query_one("#day-label", Static).update(view.day_label)
        self.query_one("#theme-icon", Static).update(view.theme.glyph)

        selector = self.query_one("#day-selector", Horizontal)
        await selector.remove_children()
        await selector.mount_all([DayButton(day) for day in view.days])

        task_list = self.query_one("#task-list", ListView)
        previous = task_list.index or 0
        self._rows = view.rows
        await task_list.clear()
        if view.rows:
            await task_list.extend([self._task_item(row) for row in view.rows])
            task_list.index = min(previous, len(view.rows) - 1)
        else:
            await task_list.append(ListItem(Label(view.empty_message or ""), classes="empty-state"))

        self.query_one("#progress-bar", ProgressBar).update(progress=view.progress.percent)
        self.query_one("#progress-text", Label).update(view.progress.label)

    def _task_item(self, row: TaskRow) -> ListItem:
        mark = "✔" if row.completed else "☐"
        classes = "task-row -completed" if row.completed else "task-row"
        return ListItem(Label(Text(f"{mark}  {row.title}    {row.meta}")), classes=classes)
