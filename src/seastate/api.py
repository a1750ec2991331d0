"""FastAPI server for the SeaState Go/No-Go dashboard.

Serves:
- Static frontend build
- /api/dashboard with per-task verdicts and display text
- /api/statuses with the {taskId: verdict} wire map
- /api/tasks/{task_id}/forecast with the windowed chart series for a task
- /api/forecast/resolve mapping a chart index back to its task
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from seastate.aggregate import (
    StatusAggregationError,
    compute_statuses,
    load_documents,
    summarize_statuses,
)
from seastate.align import get_highlighted_range
from seastate.config import get_config
from seastate.feasibility import formatted_reason, status_color, status_text
from seastate.tasks import (
    find_task_by_id,
    get_task_description,
    get_task_duration_text,
    get_task_icon,
    get_task_image,
    get_task_type,
    get_wave_height_limit_text,
    get_wave_period_limit_text,
    is_task_active,
    sort_tasks_by_start_date,
)
from seastate.windows import (
    find_task_by_data_index,
    format_chart_timestamp,
    get_filtered_weather_data,
    get_weather_range_stats,
)

app = FastAPI(title="SeaState Go/No-Go API", version="0.1.0")

# CORS for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StatusAggregationError)
async def aggregation_error_handler(request: Request, exc: StatusAggregationError):
    """Surface a failed evaluation as the dashboard's error-state payload."""
    return JSONResponse(
        status_code=500,
        content={"error": {"type": "calculation", "message": str(exc)}},
    )


def build_task_row(task, status, now: datetime) -> dict:
    """Display row for one task in the timeline."""
    return {
        "id": task.id,
        "name": task.name,
        "type": get_task_type(task.name),
        "description": get_task_description(task.name),
        "icon": get_task_icon(task.name),
        "image": get_task_image(task.name),
        "durationText": get_task_duration_text(task.duration),
        "waveHeightLimitText": get_wave_height_limit_text(task.weather_limits.hs),
        "periodLimitText": get_wave_period_limit_text(task.weather_limits.tp),
        "startDate": task.start_date,
        "endDate": task.end_date,
        "active": is_task_active(task, now),
        "status": status_text(status),
        "statusColor": status_color(status),
        "reason": formatted_reason(status) if status is not None else None,
        "verdict": status.to_dict() if status is not None else None,
    }


def load_dashboard_data(now: Optional[datetime] = None) -> dict:
    """Load documents and build the dashboard JSON structure."""
    if now is None:
        now = datetime.now(timezone.utc)

    config = get_config()
    project, weather = load_documents()
    statuses = compute_statuses(project, weather)

    # Get last update timestamp (most recent data file modification time)
    data_times = [
        os.path.getmtime(config.project_file),
        os.path.getmtime(config.forecast_file),
    ]
    last_update = format_chart_timestamp(
        datetime.fromtimestamp(max(data_times), tz=timezone.utc)
    )

    tasks = sort_tasks_by_start_date(project.tasks)

    return {
        "lastUpdate": last_update,
        "project": {
            "id": project.id,
            "name": project.name,
            "description": project.description,
            "location": project.location,
            "startDate": project.start_date,
            "endDate": project.end_date,
            "projectManager": project.project_manager,
            "marineCoordinator": project.marine_coordinator,
            "version": project.version,
        },
        "forecastLocation": weather.location,
        "tasks": [build_task_row(t, statuses.get(t.id), now) for t in tasks],
        "summary": summarize_statuses(project.tasks, statuses),
    }


@app.get("/api/dashboard")
def get_dashboard():
    """Get dashboard data for frontend."""
    return load_dashboard_data()


@app.get("/api/statuses")
def get_statuses():
    """Verdict map keyed by task id."""
    project, weather = load_documents()
    statuses = compute_statuses(project, weather)
    return {task_id: status.to_dict() for task_id, status in statuses.items()}


@app.get("/api/tasks/{task_id}/forecast")
def get_task_forecast(task_id: str, zoomed: bool = False, small_screen: bool = False):
    """Chart data for a selected task: windowed series, stats and verdict."""
    project, weather = load_documents()
    task = find_task_by_id(project.tasks, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")

    config = get_config()
    highlight = get_highlighted_range(task, weather.forecast)
    series = get_filtered_weather_data(
        weather.forecast,
        task,
        highlight,
        is_zoomed=zoomed,
        is_small_screen=small_screen,
        min_padding=config.min_padding,
        padding_fraction=config.padding_fraction,
    )

    stats = None
    if series.wave_heights:
        stats = get_weather_range_stats(
            weather.forecast,
            task,
            highlight,
            series.wave_heights,
            series.wave_periods,
        ).to_dict()

    status = compute_statuses(project, weather).get(task.id)

    return {
        "task": task.to_dict(),
        "highlightRange": highlight.to_dict() if highlight is not None else None,
        "series": series.to_dict(),
        "stats": stats,
        "status": status_text(status),
        "verdict": status.to_dict() if status is not None else None,
    }


@app.get("/api/forecast/resolve")
def resolve_task(index: int, task_id: Optional[str] = None, zoomed: bool = False):
    """Map a chart index back to the task whose window contains that sample."""
    project, weather = load_documents()

    selected = None
    data_range = None
    if task_id is not None:
        selected = find_task_by_id(project.tasks, task_id)
        if selected is None:
            raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
        config = get_config()
        highlight = get_highlighted_range(selected, weather.forecast)
        data_range = get_filtered_weather_data(
            weather.forecast,
            selected,
            highlight,
            is_zoomed=zoomed,
            is_small_screen=False,
            min_padding=config.min_padding,
            padding_fraction=config.padding_fraction,
        ).data_range

    task = find_task_by_data_index(
        index, weather.forecast, project.tasks, selected, data_range
    )
    return {"task": task.to_dict() if task is not None else None}


# Mount static frontend (production build)
frontend_dist = Path(__file__).parent.parent.parent / "frontend" / "dist"
if frontend_dist.exists():
    app.mount("/assets", StaticFiles(directory=frontend_dist / "assets"), name="assets")

    @app.get("/")
    def serve_frontend():
        """Serve frontend index.html."""
        return FileResponse(frontend_dist / "index.html")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
