import itertools

import pytest

from weekplanner.planner import PlannerController
from weekplanner.services.storage import JsonFileStore, PlannerStore
from weekplanner.state import PlannerState


@pytest.fixture
def file_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def planner_store(file_store):
    return PlannerStore(file_store)


@pytest.fixture
def controller(planner_store):
    ids = itertools.count(1_700_000_000_000)
    return PlannerController(
        planner_store,
        state=PlannerState(currentDay=0),
        clock=lambda: next(ids),
    )
