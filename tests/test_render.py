from rich.console import Console

from weekplanner.render import (
    DAYS_FULL,
    DAYS_SHORT,
    EMPTY_MESSAGE,
    Progress,
    render,
    render_rich,
)
from weekplanner.state import PlannerState, Task, Theme


def _state_with_tasks() -> PlannerState:
    state = PlannerState(currentDay=1)
    state.tasks[1].extend(
        [
            Task(id=1, title="Math", time="09:00", duration="45", completed=True),
            Task(id=2, title="English", time="", duration=30),
            Task(id=3, title="Physics", time="13:30"),
        ]
    )
    return state


def test_empty_day_renders_placeholder_and_zero_progress():
    view = render(PlannerState(currentDay=4))

    assert view.rows == ()
    assert view.empty_message == EMPTY_MESSAGE
    assert view.progress == Progress(completed=0, total=0)
    assert view.progress.percent == 0
    assert view.progress.label == "0 / 0 完了"
    assert view.day_label == DAYS_FULL[4]


def test_day_selector_has_fixed_order_and_single_active():
    view = render(PlannerState(currentDay=6))

    assert [day.label for day in view.days] == DAYS_SHORT
    assert [day.index for day in view.days if day.active] == [6]
    assert view.active_day == 6


def test_task_rows_format_time_and_duration():
    view = render(_state_with_tasks())

    assert [row.index for row in view.rows] == [0, 1, 2]
    assert [row.meta for row in view.rows] == [
        "09:00 (45分)",
        "--:-- (30分)",
        "13:30 (60分)",
    ]
    assert [row.completed for row in view.rows] == [True, False, False]
    assert view.empty_message is None


def test_progress_counts_completed_tasks():
    progress = render(_state_with_tasks()).progress

    assert progress.completed == 1
    assert progress.total == 3
    assert 0 <= progress.completed <= progress.total
    assert round(progress.percent, 2) == 33.33


def test_theme_icon_names_the_switch_action():
    assert render(PlannerState(theme=Theme.DARK)).theme.icon == "sun"
    assert render(PlannerState(theme=Theme.LIGHT)).theme.icon == "moon"


def test_render_is_idempotent():
    state = _state_with_tasks()

    assert render(state) == render(state)


def test_render_rich_shows_tasks_and_progress():
    console = Console(record=True, width=100)
    console.print(render_rich(render(_state_with_tasks())))
    output = console.export_text()

    assert DAYS_FULL[1] in output
    assert "English" in output
    assert "--:-- (30分)" in output
    assert "1 / 3 完了" in output


def test_render_rich_shows_empty_message():
    console = Console(record=True, width=100)
    console.print(render_rich(render(PlannerState(currentDay=0))))

    assert EMPTY_MESSAGE in console.export_text()


def test_render_rich_prints_markup_like_text_verbatim():
    state = PlannerState(currentDay=0)
    state.tasks[0].append(Task(id=1, title="[bold]Math", time="[/]", duration="[red"))
    console = Console(record=True, width=100)

    console.print(render_rich(render(state)))
    output = console.export_text()

    assert "[bold]Math" in output
    assert "[/] ([red分)" in output
