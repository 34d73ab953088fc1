from __future__ import annotations

import logging
import time
from typing import Callable

from weekplanner.render import PlannerView, render
from weekplanner.services.storage import PlannerStore
from weekplanner.state import DAY_COUNT, PlannerState, Task, Theme

logger = logging.getLogger(__name__)

DELETE_PROMPT = "この予定を削除しますか？"

ConfirmFn = Callable[[str], bool]
ViewListener = Callable[[PlannerView], None]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _deny(_message: str) -> bool:
    return False


class PlannerController:
    """Owns the planner state; every mutation is saved, then rendered."""

    def __init__(
        self,
        store: PlannerStore,
        *,
        state: PlannerState | None = None,
        confirm: ConfirmFn = _deny,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._store = store
        self._state = state if state is not None else store.load()
        self._confirm = confirm
        self._clock = clock
        self._listeners: list[ViewListener] = []

    @property
    def state(self) -> PlannerState:
        return self._state

    def view(self) -> PlannerView:
        return render(self._state)

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ViewListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_task(self, title: str, time: str = "", duration: str | int | None = None) -> Task:
        task = Task(id=self._clock(), title=title, time=time, duration=duration, completed=False)
        self._state.day_tasks().append(task)
        logger.debug("Added task %s to day %s", task.id, self._state.current_day)
        self._commit()
        return task

    def toggle_task(self, index: int) -> bool:
        tasks = self._state.day_tasks()
        toggled = 0 <= index < len(tasks)
        if toggled:
            tasks[index].completed = not tasks[index].completed
        else:
            logger.debug("Ignoring toggle of missing task index %s", index)
        self._commit()
        return toggled

    def delete_task(self, index: int, confirm: ConfirmFn | None = None) -> bool:
        if not self._in_range(index):
            logger.debug("Ignoring delete of missing task index %s", index)
            return False
        if not (confirm or self._confirm)(DELETE_PROMPT):
            return False
        return self.remove_task(index)

    def remove_task(self, index: int) -> bool:
        """Delete without asking; for UIs that run their own confirmation."""
        if not self._in_range(index):
            return False
        removed = self._state.day_tasks().pop(index)
        logger.debug("Removed task %s from day %s", removed.id, self._state.current_day)
        self._commit()
        return True

    def select_day(self, index: int) -> None:
        if not 0 <= index < DAY_COUNT:
            raise ValueError(f"Day index must be between 0 and {DAY_COUNT - 1}, got {index}")
        self._state.current_day = index
        self._commit()

    def toggle_theme(self) -> Theme:
        self._state.theme = Theme.LIGHT if self._state.theme == Theme.DARK else Theme.DARK
        self._commit()
        return self._state.theme

    def index_of(self, task_id: int) -> int | None:
        for index, task in enumerate(self._state.day_tasks()):
            if task.id == task_id:
                return index
        return None

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._state.day_tasks())

    def _commit(self) -> None:
        self._store.save(self._state)
        view = render(self._state)
        for listener in self._listeners:
            listener(view)
