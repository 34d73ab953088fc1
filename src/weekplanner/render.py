from __future__ import annotations

from dataclasses import dataclass

from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from weekplanner.state import PlannerState, Task, Theme

DAYS_SHORT = ["月", "火", "水", "木", "金", "土", "日"]
DAYS_FULL = ["月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日", "日曜日"]

EMPTY_MESSAGE = "今日の予定はありません"
TIME_PLACEHOLDER = "--:--"
MINUTES_SUFFIX = "分"

THEME_ICONS = {Theme.DARK: "sun", Theme.LIGHT: "moon"}
ICON_GLYPHS = {"sun": "☀", "moon": "☾"}


@dataclass(frozen=True)
class DayItem:
    index: int
    label: str
    active: bool


@dataclass(frozen=True)
class TaskRow:
    index: int
    task_id: int
    title: str
    time_label: str
    duration_label: str
    completed: bool

    @property
    def meta(self) -> str:
        return f"{self.time_label} ({self.duration_label})"


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100

    @property
    def label(self) -> str:
        return f"{self.completed} / {self.total} 完了"


@dataclass(frozen=True)
class ThemeView:
    theme: Theme
    # Names the action: the sun switches to light mode, the moon back to dark.
    icon: str

    @property
    def glyph(self) -> str:
        return ICON_GLYPHS[self.icon]


@dataclass(frozen=True)
class PlannerView:
    days: tuple[DayItem, ...]
    day_label: str
    rows: tuple[TaskRow, ...]
    empty_message: str | None
    progress: Progress
    theme: ThemeView

    @property
    def active_day(self) -> int:
        return next(day.index for day in self.days if day.active)


def render(state: PlannerState) -> PlannerView:
    """Project the planner state onto a complete view model."""
    tasks = state.day_tasks()
    rows = tuple(_task_row(index, task) for index, task in enumerate(tasks))
    completed = sum(1 for row in rows if row.completed)
    return PlannerView(
        days=render_days(state.current_day),
        day_label=DAYS_FULL[state.current_day],
        rows=rows,
        empty_message=None if rows else EMPTY_MESSAGE,
        progress=Progress(completed=completed, total=len(rows)),
        theme=render_theme(state.theme),
    )


def render_days(current_day: int) -> tuple[DayItem, ...]:
    return tuple(
        DayItem(index=index, label=label, active=index == current_day)
        for index, label in enumerate(DAYS_SHORT)
    )


def render_theme(theme: Theme) -> ThemeView:
    return ThemeView(theme=theme, icon=THEME_ICONS[theme])


def format_time(time: str) -> str:
    return time or TIME_PLACEHOLDER


def format_duration(duration: str | int) -> str:
    return f"{duration}{MINUTES_SUFFIX}"


def _task_row(index: int, task: Task) -> TaskRow:
    return TaskRow(
        index=index,
        task_id=task.id,
        title=task.title,
        time_label=format_time(task.time),
        duration_label=format_duration(task.duration),
        completed=task.completed,
    )


def render_rich(view: PlannerView) -> Panel:
    """Rich projection of a view, used for console output."""
    accent = "yellow" if view.theme.theme == Theme.DARK else "blue"

    days = Text()
    for day in view.days:
        style = f"bold reverse {accent}" if day.active else "dim"
        days.append(f" {day.label} ", style=style)
        days.append(" ")

    if view.rows:
        body = Table(show_header=True, expand=True)
        body.add_column("#", style="cyan", width=3)
        body.add_column("", width=3)
        body.add_column("Task", style="white")
        body.add_column("Time", style="cyan", width=14)
        for row in view.rows:
            mark = Text("✔", style="green") if row.completed else Text("☐")
            title = Text(row.title, style="strike dim" if row.completed else "")
            body.add_row(str(row.index + 1), mark, title, Text(row.meta))
    else:
        body = Text(view.empty_message or EMPTY_MESSAGE, style="dim italic")

    progress = Table.grid(expand=True)
    progress.add_column(ratio=1)
    progress.add_column(justify="right")
    progress.add_row(
        ProgressBar(total=100, completed=view.progress.percent, complete_style=accent),
        Text(view.progress.label),
    )

    return Panel(
        Group(days, Text(""), body, Text(""), progress),
        title=f"{view.theme.glyph} {view.day_label}",
        border_style=accent,
    )
