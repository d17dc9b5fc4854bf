"""Forward planning and retroplanning of task dates."""

from datetime import date, timedelta
from typing import Dict, List, Optional

from .errors import InvalidArgumentError
from .graph import build_dependents_map, topological_order
from .rules import default_rules, validate_plan
from .schemas import Project, Task


def _days(count: int) -> timedelta:
    return timedelta(days=count)


def _require_tasks(project: Optional[Project]) -> Project:
    if project is None:
        raise InvalidArgumentError("Project cannot be null")
    if not project.tasks:
        raise InvalidArgumentError("Project has no tasks")
    return project


def _ordered_tasks(project: Project) -> List[Task]:
    validate_plan(project, default_rules())
    return topological_order(project.tasks)


def compute_forward(project: Optional[Project]) -> None:
    """Date every task from the project start date and derive the project end date.

    Tasks whose start date is already set are left in place. All validation,
    including the cycle check, happens before the first date is written.

    Raises:
        InvalidArgumentError: If the project, its tasks or its start date are missing,
            or if the plan breaks a rule from :func:`default_rules`.
        CircularDependencyError: If the dependencies form a cycle.
    """

    project = _require_tasks(project)
    if project.start_date is None:
        raise InvalidArgumentError("Project start date is required")

    order = _ordered_tasks(project)
    index = project.task_index()
    resolved: Dict[str, bool] = {}
    for task in project.tasks:
        resolved[task.id] = task.start_date is not None
        if task.start_date is not None and task.end_date is None:
            task.end_date = task.start_date + _days(task.effective_duration - 1)

    for task in order:
        _resolve_forward(task, index, resolved, project.start_date)

    end_date = project.start_date
    for task in project.tasks:
        if task.end_date > end_date:
            end_date = task.end_date
    project.end_date = end_date


def _resolve_forward(task: Task, index: Dict[str, Task], resolved: Dict[str, bool], project_start: date) -> None:
    # Collect the unresolved part of the ancestor chain, then date it top-down.
    pending: List[Task] = []
    current: Optional[Task] = task
    while current is not None and not resolved[current.id]:
        pending.append(current)
        current = index[current.dependency] if current.dependency is not None else None

    for item in reversed(pending):
        if item.dependency is None:
            start = project_start
        else:
            start = index[item.dependency].end_date + _days(item.effective_delay)
        item.start_date = start
        item.end_date = start + _days(item.effective_duration - 1)
        resolved[item.id] = True


def compute_backward(project: Optional[Project]) -> None:
    """Retroplanning: date every task back from the project end date.

    A task ends at the project end date when nothing depends on it, otherwise
    in time for its earliest dependent, honouring that dependent's own delay.
    Tasks whose end date is already set are left in place.

    Raises:
        InvalidArgumentError: If the project, its tasks or its end date are missing,
            or if the plan breaks a rule from :func:`default_rules`.
        CircularDependencyError: If the dependencies form a cycle.
    """

    project = _require_tasks(project)
    if project.end_date is None:
        raise InvalidArgumentError("Project end date is required for retroplanning")

    order = _ordered_tasks(project)
    order.reverse()
    dependents = build_dependents_map(project.tasks)
    resolved: Dict[str, bool] = {}
    for task in project.tasks:
        resolved[task.id] = task.end_date is not None
        if task.end_date is not None and task.start_date is None:
            task.start_date = task.end_date - _days(task.effective_duration - 1)

    for task in order:
        _resolve_backward(task, dependents, resolved, project.end_date)

    start_date = project.end_date
    for task in project.tasks:
        if task.start_date < start_date:
            start_date = task.start_date
    project.start_date = start_date


def _resolve_backward(
    task: Task,
    dependents: Dict[str, List[Task]],
    resolved: Dict[str, bool],
    project_end: date,
) -> None:
    stack = [(task, False)]
    while stack:
        current, expanded = stack.pop()
        if resolved[current.id]:
            continue
        children = dependents.get(current.id, [])
        if not expanded:
            stack.append((current, True))
            stack.extend((child, False) for child in reversed(children) if not resolved[child.id])
            continue

        if children:
            end = min(child.start_date - _days(child.effective_delay) for child in children)
        else:
            end = project_end
        current.end_date = end
        current.start_date = end - _days(current.effective_duration - 1)
        resolved[current.id] = True


def clear_dates(project: Project) -> None:
    """Unset every task date so the next scheduler run recomputes them all."""

    for task in project.tasks:
        task.start_date = None
        task.end_date = None
