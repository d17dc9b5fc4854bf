"""
Shared fixtures for the planner test suite.
"""
from datetime import date

import pytest

from src.task_planner import project_store
from src.task_planner.schemas import Project, Task


@pytest.fixture(autouse=True)
def clean_store():
    """Start every test with an empty project store."""
    project_store.reset()
    yield
    project_store.reset()


@pytest.fixture
def solar_project():
    """Five-task installation chain anchored on 2025-01-01."""
    return Project(
        id="solar",
        name="Solar installation",
        start_date=date(2025, 1, 1),
        tasks=[
            Task(id="survey", name="Site survey", duration=3, delay_before_start=0),
            Task(id="order", name="Order equipment", duration=2, delay_before_start=1, dependency="survey"),
            Task(id="install", name="Installation", duration=4, delay_before_start=0, dependency="order"),
            Task(id="connect", name="Grid connection", duration=2, delay_before_start=1, dependency="install"),
            Task(id="commission", name="Commissioning", duration=1, delay_before_start=0, dependency="connect"),
        ],
    )


@pytest.fixture
def cyclic_project():
    """Two tasks depending on each other plus an unrelated task."""
    return Project(
        id="loop",
        name="Loop",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 2, 1),
        tasks=[
            Task(id="a", name="A", duration=2, dependency="b"),
            Task(id="b", name="B", duration=2, dependency="a"),
            Task(id="c", name="C", duration=1),
        ],
    )
