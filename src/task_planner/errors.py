"""Exceptions raised while planning project dates."""


class PlanningError(Exception):
    """Base class for every planning failure."""


class InvalidArgumentError(PlanningError, ValueError):
    """Raised when a required input (project, tasks, anchor date) is missing or malformed."""


class CircularDependencyError(PlanningError):
    """Raised when task dependencies loop back on themselves."""


class UnexpectedPlanningError(PlanningError):
    """Wraps failures that do not come from the planning core itself."""
