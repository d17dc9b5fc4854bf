"""Pydantic schemas for project planning data structures."""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Task(BaseModel):
    """Represents a single task in a project plan."""

    id: str
    name: str
    duration: Optional[int] = Field(default=None, gt=0)
    delay_before_start: Optional[int] = Field(default=None, ge=0)
    dependency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def effective_duration(self) -> int:
        """Duration in days, defaulting to a single day."""
        return self.duration if self.duration is not None else 1

    @property
    def effective_delay(self) -> int:
        return self.delay_before_start if self.delay_before_start is not None else 0


class Project(BaseModel):
    """Collection of tasks scheduled against a start or end date."""

    id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    tasks: List[Task] = []

    def task_index(self) -> Dict[str, Task]:
        return {task.id: task for task in self.tasks}
