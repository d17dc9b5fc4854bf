"""Data ingestion utilities for project plans."""

import logging
from datetime import date
from pathlib import Path
from typing import IO, Iterable, Optional, Union

import pandas as pd

from .errors import InvalidArgumentError
from .schemas import Project, Task

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "name")
TASK_COLUMNS = ("id", "name", "duration", "delay_before_start", "dependency", "start_date", "end_date")


class CSVIngestor:
    """Load project plans from CSV files or file-like objects."""

    def __init__(self, source: Union[str, Path, IO[str]]) -> None:
        self.source = Path(source) if isinstance(source, (str, Path)) else source

    def _read_frame(self) -> pd.DataFrame:
        # Everything is read as text so ids like "007" survive; pydantic coerces the rest.
        df = pd.read_csv(self.source, dtype=str, skipinitialspace=True)
        df.columns = [str(column).strip() for column in df.columns]
        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise InvalidArgumentError(f"CSV is missing required columns: {', '.join(missing)}")
        unknown = [column for column in df.columns if column not in TASK_COLUMNS]
        if unknown:
            logger.debug("Ignoring unknown CSV columns: %s", unknown)
        return df[[column for column in TASK_COLUMNS if column in df.columns]]

    def read_tasks(self) -> Iterable[Task]:
        df = self._read_frame()
        for row in df.to_dict(orient="records"):
            cleaned = {key: value.strip() for key, value in row.items() if isinstance(value, str) and value.strip()}
            yield Task(**cleaned)

    def read_project(
        self,
        project_id: str,
        name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Project:
        tasks = list(self.read_tasks())
        logger.info("Loaded %s tasks for project %s", len(tasks), project_id)
        return Project(id=project_id, name=name, start_date=start_date, end_date=end_date, tasks=tasks)
