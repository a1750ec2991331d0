"""Status aggregation: project tasks + forecast → per-task Go/No-Go verdicts.

This module converts a project schedule and a wave forecast into:
- a {task_id: GoNoGoStatus} map (nearest forecast sample per task start)
- go_no_go.csv: one row per task, "No Data" where no sample aligns
"""

import argparse
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from seastate.align import get_weather_for_task
from seastate.config import get_config
from seastate.feasibility import (
    CAUTION_RATIO,
    NO_DATA,
    PERIOD_TOLERANCE_S,
    GoNoGoStatus,
    check_task_feasibility,
    status_text,
)
from seastate.schema import ForecastPoint, Task, load_forecast, load_project
from seastate.tasks import get_task_type

STATUS_COLUMNS = [
    "task_id",
    "task_name",
    "task_type",
    "start_date",
    "end_date",
    "status",
    "can_proceed",
    "reason",
    "forecast_timestamp",
]


class StatusAggregationError(RuntimeError):
    """Raised when evaluating any task fails; names the offending task."""

    def __init__(self, task_id: str, cause: Exception):
        self.task_id = task_id
        self.cause = cause
        super().__init__(f"Failed to evaluate task {task_id}: {cause}")


def calculate_go_no_go_statuses(
    tasks: List[Task],
    weather_forecast: List[ForecastPoint],
    caution_ratio: float = CAUTION_RATIO,
    period_tolerance: float = PERIOD_TOLERANCE_S,
) -> Dict[str, GoNoGoStatus]:
    """Evaluate every task against the forecast sample nearest its start.

    Tasks with no aligned sample (empty forecast) are omitted; no verdict is
    fabricated. The returned dict iterates in task order.

    Args:
        tasks: Project tasks (ids must be unique)
        weather_forecast: Chronological forecast points
        caution_ratio: Passed through to check_task_feasibility
        period_tolerance: Passed through to check_task_feasibility

    Returns:
        Dict mapping task id to GoNoGoStatus

    Raises:
        ValueError: on duplicate task ids
        StatusAggregationError: if evaluating a task fails
    """
    seen = set()
    for task in tasks:
        if task.id in seen:
            raise ValueError(f"Duplicate task id: {task.id}")
        seen.add(task.id)

    statuses: Dict[str, GoNoGoStatus] = {}
    for task in tasks:
        try:
            task_weather = get_weather_for_task(weather_forecast, task)
            if task_weather is None:
                continue
            statuses[task.id] = check_task_feasibility(
                task,
                task_weather,
                caution_ratio=caution_ratio,
                period_tolerance=period_tolerance,
            )
        except (ValueError, TypeError, KeyError, ArithmeticError) as e:
            raise StatusAggregationError(task.id, e) from e

    return statuses


def load_documents():
    """Load the project and forecast documents named in config.yaml.

    Returns:
        Tuple of (project, weather)
    """
    config = get_config()
    project = load_project(config.project_file, config.project_id)
    weather = load_forecast(config.forecast_file)
    return project, weather


def compute_statuses(project, weather) -> Dict[str, GoNoGoStatus]:
    """Verdicts for a loaded project using the configured thresholds."""
    config = get_config()
    return calculate_go_no_go_statuses(
        project.tasks,
        weather.forecast,
        caution_ratio=config.caution_ratio,
        period_tolerance=config.period_tolerance_s,
    )


def summarize_statuses(
    tasks: List[Task], statuses: Dict[str, GoNoGoStatus]
) -> Dict[str, int]:
    """Count tasks per status text (GO / CAUTION / NO-GO / No Data)."""
    counts = {"GO": 0, "CAUTION": 0, "NO-GO": 0, NO_DATA: 0}
    for task in tasks:
        counts[status_text(statuses.get(task.id))] += 1
    return counts


def statuses_frame(
    tasks: List[Task], statuses: Dict[str, GoNoGoStatus]
) -> pd.DataFrame:
    """One row per task in input order, "No Data" where no verdict exists."""
    rows = []
    for task in tasks:
        status = statuses.get(task.id)
        rows.append(
            {
                "task_id": task.id,
                "task_name": task.name,
                "task_type": get_task_type(task.name),
                "start_date": task.start_date,
                "end_date": task.end_date,
                "status": status_text(status),
                "can_proceed": status.can_proceed if status is not None else None,
                "reason": status.reason if status is not None else "",
                "forecast_timestamp": status.timestamp if status is not None else None,
            }
        )

    return pd.DataFrame(rows, columns=STATUS_COLUMNS)


def aggregate(
    project_path: Optional[Path] = None,
    forecast_path: Optional[Path] = None,
    output_dir: Path = Path("data"),
    project_id: Optional[str] = None,
) -> Dict[str, pd.DataFrame]:
    """Main pipeline: documents → verdicts → go_no_go.csv.

    Args:
        project_path: Path to project.json (default: from config)
        forecast_path: Path to forecast.json (default: from config)
        output_dir: Directory to write output CSV
        project_id: Project to evaluate (default: config, then first project)

    Returns:
        Dict of output DataFrames
    """
    config = get_config()

    print("=" * 70)
    print(f"{config.project_name} Aggregation")
    print("=" * 70)

    project_path = Path(project_path) if project_path else config.project_file
    forecast_path = Path(forecast_path) if forecast_path else config.forecast_file
    if project_id is None:
        project_id = config.project_id

    print("\nConfig loaded:")
    print(f"  Caution ratio: {config.caution_ratio}")
    print(f"  Period tolerance: {config.period_tolerance_s}s")

    print(f"\nLoading project from {project_path}...")
    project = load_project(project_path, project_id)
    print(f"  ✓ {project.name}: {len(project.tasks)} tasks")

    print(f"\nLoading forecast from {forecast_path}...")
    weather = load_forecast(forecast_path)
    print(f"  ✓ {len(weather.forecast)} forecast points")

    if not weather.forecast:
        print("\n⚠️  Empty forecast: every task will show No Data")

    print("\nEvaluating tasks...")
    statuses = calculate_go_no_go_statuses(
        project.tasks,
        weather.forecast,
        caution_ratio=config.caution_ratio,
        period_tolerance=config.period_tolerance_s,
    )
    print(f"  ✓ {len(statuses)} verdicts")

    counts = summarize_statuses(project.tasks, statuses)
    for label, count in counts.items():
        print(f"    {label}: {count}")

    status_df = statuses_frame(project.tasks, statuses)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    status_df.to_csv(output_dir / "go_no_go.csv", index=False)

    print(f"\n✓ go_no_go.csv written to {output_dir}/ ({len(status_df)} rows)")

    return {"go_no_go": status_df}


def main():
    parser = argparse.ArgumentParser(
        description="Evaluate Go/No-Go verdicts for a project against a wave forecast"
    )
    parser.add_argument(
        "--project",
        type=str,
        default=None,
        help="Path to project.json (default: from config.yaml)",
    )
    parser.add_argument(
        "--forecast",
        type=str,
        default=None,
        help="Path to forecast.json (default: from config.yaml)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data",
        help="Output directory for CSVs (default: data)",
    )
    parser.add_argument(
        "--project-id",
        type=str,
        default=None,
        help="Project id within the document (default: first project)",
    )

    args = parser.parse_args()

    results = aggregate(
        project_path=Path(args.project) if args.project else None,
        forecast_path=Path(args.forecast) if args.forecast else None,
        output_dir=Path(args.output_dir),
        project_id=args.project_id,
    )

    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(
        results["go_no_go"][["task_id", "task_name", "status", "reason"]].to_string(
            index=False
        )
    )
    print("\n" + "=" * 70)
    print("COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    main()
