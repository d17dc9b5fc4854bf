"""Export utilities for scheduled project plans."""

from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .ingest import TASK_COLUMNS
from .schemas import Project, Task

_RULE_WIDTH = 110


def _tasks_frame(tasks: Iterable[Task]) -> pd.DataFrame:
    df = pd.DataFrame([task.model_dump() for task in tasks], columns=list(TASK_COLUMNS))
    # Nullable integers keep "3" from turning into "3.0" when a column has gaps.
    return df.astype({"duration": "Int64", "delay_before_start": "Int64"})


def export_tasks_to_csv(tasks: Iterable[Task], path: Path) -> None:
    _tasks_frame(tasks).to_csv(path, index=False)


def tasks_to_csv(tasks: Iterable[Task]) -> str:
    return _tasks_frame(tasks).to_csv(index=False)


def _cell(value) -> str:
    return "-" if value is None else str(value)


def format_schedule(project: Project) -> str:
    """Render the project dates and a fixed-width task table."""

    names = project.task_index()
    lines: List[str] = [
        "=" * _RULE_WIDTH,
        f"PROJECT: {project.name}",
        f"Start date: {_cell(project.start_date)}",
        f"End date: {_cell(project.end_date)}",
        "=" * _RULE_WIDTH,
        "",
        f"{'Task':<20} | {'Duration':<10} | {'Delay before':<15} | {'Depends on':<20} | {'Start':<12} | {'End':<12}",
        "-" * _RULE_WIDTH,
    ]
    for task in project.tasks:
        parent = names.get(task.dependency) if task.dependency else None
        depends_on = parent.name if parent is not None else _cell(task.dependency)
        duration = f"{task.effective_duration} days"
        delay = f"{task.effective_delay} days"
        lines.append(
            f"{task.name:<20} | {duration:<10} | {delay:<15} | "
            f"{depends_on:<20} | {_cell(task.start_date):<12} | {_cell(task.end_date):<12}"
        )
    lines.append("=" * _RULE_WIDTH)
    return "\n".join(lines)
