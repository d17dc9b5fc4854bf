"""Command-line entrypoint: plan a CSV task list and print the schedule."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .config import configure_logging
from .errors import PlanningError
from .export import export_tasks_to_csv, format_schedule
from .ingest import CSVIngestor
from .scheduler import compute_backward, compute_forward

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute task dates for a project")
    parser.add_argument("--tasks", required=True, type=Path, help="CSV file with the project tasks")
    parser.add_argument("--name", default="Project", help="Project name shown in the schedule")
    anchor = parser.add_mutually_exclusive_group(required=True)
    anchor.add_argument("--start", type=_parse_date, help="Project start date (forward planning)")
    anchor.add_argument("--end", type=_parse_date, help="Project end date (retroplanning)")
    parser.add_argument("--export", type=Path, help="Write the scheduled tasks to this CSV file")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        project = CSVIngestor(args.tasks).read_project(
            project_id=args.tasks.stem,
            name=args.name,
            start_date=args.start,
            end_date=args.end,
        )
        if args.end is not None:
            compute_backward(project)
        else:
            compute_forward(project)
    except (PlanningError, ValidationError) as exc:
        logger.debug("Planning failed", exc_info=exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(format_schedule(project))
    if args.export is not None:
        export_tasks_to_csv(project.tasks, args.export)
        logger.info("Exported %s tasks to %s", len(project.tasks), args.export)
    return 0


if __name__ == "__main__":
    sys.exit(main())
