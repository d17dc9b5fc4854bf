"""Rule evaluation for project plans."""

from collections.abc import Iterable

from .errors import InvalidArgumentError
from .schemas import Project


class RuleViolation(InvalidArgumentError):
    """Raised when a project plan violates predefined rules."""


def ensure_unique_task_ids(plan: Project) -> None:
    seen: set[str] = set()
    for task in plan.tasks:
        if task.id in seen:
            raise RuleViolation(f"Duplicate task id detected: {task.id}")
        seen.add(task.id)


def ensure_dependencies_known(plan: Project) -> None:
    known = {task.id for task in plan.tasks}
    for task in plan.tasks:
        if task.dependency is not None and task.dependency not in known:
            raise RuleViolation(f"Task {task.id} depends on unknown task {task.dependency}")


def validate_plan(plan: Project, rules: Iterable) -> None:
    for rule in rules:
        rule(plan)


def default_rules() -> list:
    return [ensure_unique_task_ids, ensure_dependencies_known]
