"""Dependency graph analysis: ordering, cycle detection and reverse lookups."""

from typing import Dict, List, Sequence

from .errors import CircularDependencyError
from .rules import RuleViolation
from .schemas import Task

_UNVISITED, _IN_PROGRESS, _FINISHED = 0, 1, 2


def topological_order(tasks: Sequence[Task]) -> List[Task]:
    """Return ``tasks`` ordered so that every dependency precedes its dependents.

    Each task has at most one dependency, so the depth-first walk from a task
    is the chain of its ancestors. Chains are walked with an explicit stack,
    starting from each task in input order, and appended ancestor first.

    Raises:
        CircularDependencyError: If a walk reaches a task that is still in progress.
        RuleViolation: If a dependency names a task that is not in ``tasks``.
    """

    index = {task.id: task for task in tasks}
    state: Dict[str, int] = {}
    ordered: List[Task] = []

    for root in tasks:
        chain: List[Task] = []
        current = root
        while current is not None and state.get(current.id, _UNVISITED) != _FINISHED:
            if state.get(current.id) == _IN_PROGRESS:
                ids = [task.id for task in chain]
                path = ids[ids.index(current.id):] + [current.id]
                raise CircularDependencyError(
                    "Circular dependency detected in task dependencies: " + " -> ".join(path)
                )
            state[current.id] = _IN_PROGRESS
            chain.append(current)
            if current.dependency is None:
                current = None
                continue
            parent = index.get(current.dependency)
            if parent is None:
                raise RuleViolation(f"Task {current.id} depends on unknown task {current.dependency}")
            current = parent

        for task in reversed(chain):
            state[task.id] = _FINISHED
            ordered.append(task)

    return ordered


def has_circular_dependency(tasks: Sequence[Task]) -> bool:
    try:
        topological_order(tasks)
    except CircularDependencyError:
        return True
    return False


def build_dependents_map(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """Map each task id to the tasks that name it as their dependency."""

    dependents: Dict[str, List[Task]] = {}
    for task in tasks:
        if task.dependency is not None:
            dependents.setdefault(task.dependency, []).append(task)
    return dependents
