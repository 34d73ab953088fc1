from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DAY_COUNT = 7
DEFAULT_DURATION = "60"


class Theme(StrEnum):
    DARK = "dark"
    LIGHT = "light"


def today_index(today: date | None = None) -> int:
    """Weekday index with Monday=0 and Sunday=6."""
    return (today or date.today()).weekday()


def empty_week() -> dict[int, list["Task"]]:
    return {day: [] for day in range(DAY_COUNT)}


class Task(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: str = ""
    time: str = ""
    duration: str | int = DEFAULT_DURATION
    completed: bool = False

    @field_validator("time", mode="before")
    @classmethod
    def _normalize_time(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("duration", mode="before")
    @classmethod
    def _default_duration(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_DURATION
        return value


class PlannerState(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, validate_assignment=True)

    current_day: int = Field(default_factory=today_index, alias="currentDay", ge=0, le=DAY_COUNT - 1)
    tasks: dict[int, list[Task]] = Field(default_factory=empty_week)
    theme: Theme = Theme.DARK

    @field_validator("tasks", mode="before")
    @classmethod
    def _fill_week(cls, value: Any) -> Any:
        if value is None:
            return empty_week()
        if not isinstance(value, dict):
            return value
        week: dict[Any, Any] = {}
        for day in range(DAY_COUNT):
            # Stored blobs carry string keys ("0".."6").
            tasks = value.get(day, value.get(str(day)))
            week[day] = [] if tasks is None else tasks
        return week

    def day_tasks(self, day: int | None = None) -> list[Task]:
        return self.tasks[self.current_day if day is None else day]

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
