"""In-memory project storage shared by the API and the CLI."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, List

from .schemas import Project

logger = logging.getLogger(__name__)

_project_store: Dict[str, Project] = {}
_lock = Lock()


def save_project(project: Project) -> None:
    """Store a copy of the project, replacing any previous version."""

    if not project.id:
        raise ValueError("Project ID is required to store a project.")

    snapshot = project.model_copy(deep=True)
    with _lock:
        replaced = project.id in _project_store
        _project_store[project.id] = snapshot
    logger.info("Saved project %s (tasks=%s, replaced=%s)", project.id, len(project.tasks), replaced)


def get_project(project_id: str) -> Project | None:
    """Return a private copy of the stored project, if any."""

    if not project_id:
        return None

    with _lock:
        project = _project_store.get(project_id)
    return project.model_copy(deep=True) if project is not None else None


def list_projects() -> List[Project]:
    with _lock:
        snapshot = list(_project_store.values())
    return [project.model_copy(deep=True) for project in snapshot]


def delete_project(project_id: str) -> bool:
    with _lock:
        existed = _project_store.pop(project_id, None) is not None
    if existed:
        logger.info("Deleted project %s", project_id)
    return existed


def reset() -> None:
    """Remove every stored project."""

    with _lock:
        count = len(_project_store)
        _project_store.clear()
    logger.info("Project store reset. Removed %s projects", count)
