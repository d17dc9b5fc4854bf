"""FastAPI application entrypoint."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Callable

from fastapi import FastAPI, File, HTTPException, Request, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.task_planner import project_store
from src.task_planner.config import configure_logging, get_max_upload_bytes
from src.task_planner.errors import CircularDependencyError, InvalidArgumentError, UnexpectedPlanningError
from src.task_planner.export import tasks_to_csv
from src.task_planner.ingest import CSVIngestor
from src.task_planner.scheduler import clear_dates, compute_backward, compute_forward
from src.task_planner.schemas import Project

configure_logging()

app = FastAPI(title="Task Planner")

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"csv"}
PROJECT_NOT_FOUND = "Project not found. Save the project before computing dates."


def _json_error(status_code: int, message: str) -> JSONResponse:
    """Return a standardized JSON error response."""

    logger.warning("Returning error %s: %s", status_code, message)
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.warning("HTTPException at %s: %s", request.url.path, message)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation error at %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"error": "Invalid request payload."})


def _project_payload(project: Project) -> dict[str, Any]:
    return project.model_dump(mode="json")


@app.get("/")
def read_root() -> dict[str, str]:
    """Basic health endpoint."""

    return {"status": "ok"}


@app.post("/projects")
def save_project(project: Project) -> JSONResponse:
    """Create or replace a project with its tasks."""

    project_store.save_project(project)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=_project_payload(project))


@app.get("/projects")
def list_projects() -> list[dict[str, Any]]:
    return [_project_payload(project) for project in project_store.list_projects()]


@app.get("/projects/{project_id}")
def get_project(project_id: str) -> dict[str, Any]:
    project = project_store.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND)
    return _project_payload(project)


@app.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: str) -> Response:
    if not project_store.delete_project(project_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _get_extension(filename: str) -> str:
    return Path(filename).suffix.lower().lstrip(".")


async def _read_file(file: UploadFile) -> bytes:
    data = await file.read()
    logger.debug("Read %s bytes from uploaded file %s", len(data), file.filename)
    return data


def _handle_csv_file(data: bytes) -> list:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:  # pragma: no cover - depends on user input
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to decode CSV as UTF-8.") from exc

    try:
        return list(CSVIngestor(io.StringIO(text)).read_tasks())
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CSV contains invalid task values.") from exc
    except Exception as exc:  # pragma: no cover - depends on pandas parsing
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to parse CSV file.") from exc


@app.post("/projects/{project_id}/tasks/upload")
async def upload_tasks(project_id: str, file: UploadFile = File(...)) -> JSONResponse:
    """Replace the task list of a stored project with the tasks of a CSV upload."""

    project = project_store.get_project(project_id)
    if project is None:
        return _json_error(status.HTTP_404_NOT_FOUND, PROJECT_NOT_FOUND)

    if not file.filename:
        return _json_error(status.HTTP_400_BAD_REQUEST, "Filename is required.")

    if _get_extension(file.filename) not in ALLOWED_EXTENSIONS:
        return _json_error(status.HTTP_400_BAD_REQUEST, "Unsupported file type. Allowed: csv.")

    data = await _read_file(file)

    max_bytes = get_max_upload_bytes()
    if len(data) > max_bytes:
        return _json_error(status.HTTP_400_BAD_REQUEST, f"File too large. Limit is {max_bytes} bytes.")
    if not data:
        return _json_error(status.HTTP_400_BAD_REQUEST, "Uploaded file is empty.")

    project.tasks = _handle_csv_file(data)
    project_store.save_project(project)

    logger.info("Stored %s uploaded tasks for project %s", len(project.tasks), project_id)
    return JSONResponse(status_code=status.HTTP_200_OK, content=_project_payload(project))


def _run_planning(
    project_id: str,
    planner: Callable[[Project], None],
    recompute: bool,
    action: str,
    notice: str,
) -> JSONResponse:
    project = project_store.get_project(project_id)
    if project is None:
        return _json_error(status.HTTP_404_NOT_FOUND, PROJECT_NOT_FOUND)

    if recompute:
        clear_dates(project)

    try:
        planner(project)
    except InvalidArgumentError as exc:
        return _json_error(status.HTTP_400_BAD_REQUEST, str(exc))
    except CircularDependencyError as exc:
        return _json_error(status.HTTP_409_CONFLICT, f"Error: {exc}")
    except Exception as exc:
        failure = UnexpectedPlanningError(f"An error occurred while {action}: {exc}")
        logger.error("Planning failed for project %s", project_id, exc_info=exc)
        return _json_error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(failure))

    # Only a fully successful run reaches the store.
    project_store.save_project(project)
    logger.info("Finished %s for project %s", action, project_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"message": notice, "project": _project_payload(project)},
    )


@app.post("/projects/{project_id}/compute-dates")
def compute_dates(project_id: str, recompute: bool = False) -> JSONResponse:
    """Forward planning from the project start date."""

    return _run_planning(
        project_id,
        compute_forward,
        recompute,
        action="computing dates",
        notice="Task dates computed successfully",
    )


@app.post("/projects/{project_id}/retroplanning")
def retroplanning(project_id: str, recompute: bool = False) -> JSONResponse:
    """Backward planning from the project end date."""

    return _run_planning(
        project_id,
        compute_backward,
        recompute,
        action="retroplanning",
        notice="Retroplanning computed successfully",
    )


@app.get("/projects/{project_id}/export")
def export_project(project_id: str) -> Response:
    project = project_store.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND)

    return Response(
        content=tasks_to_csv(project.tasks),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{project_id}.csv"'},
    )
