"""Schema definitions, loaders and validators for SeaState data documents.

Two documents feed the engine:
- project.json: ProjectData (metadata, vessels, projects -> tasks)
- forecast.json: {location: {lat, lon}, forecast: [{timestamp, wave_height, wave_period}]}
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd


# Field name constants for each document
class ForecastFields:
    """Field names for forecast points in forecast.json"""

    TIMESTAMP = "timestamp"
    WAVE_HEIGHT = "wave_height"
    WAVE_PERIOD = "wave_period"

    @classmethod
    def all(cls) -> List[str]:
        return [cls.TIMESTAMP, cls.WAVE_HEIGHT, cls.WAVE_PERIOD]


class TaskFields:
    """Field names for tasks in project.json"""

    ID = "id"
    NAME = "name"
    START_DATE = "startDate"
    END_DATE = "endDate"
    DURATION = "duration"
    WEATHER_LIMITS = "weatherLimits"
    LEVEL = "level"
    PARENT_ID = "parentId"

    @classmethod
    def all(cls) -> List[str]:
        return [
            cls.ID,
            cls.NAME,
            cls.START_DATE,
            cls.END_DATE,
            cls.DURATION,
            cls.WEATHER_LIMITS,
        ]


class LimitFields:
    """Field names for a task's weatherLimits"""

    HS = "Hs"
    TP = "Tp"

    @classmethod
    def all(cls) -> List[str]:
        return [cls.HS, cls.TP]


# ============================================================================
# Time handling
# ============================================================================


def parse_time(value: Any) -> pd.Timestamp:
    """Parse an ISO date or timestamp into a UTC-aware Timestamp.

    Date-only values ("2025-08-24") are midnight UTC. Naive timestamps are
    taken as UTC.
    """
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid timestamp: {value!r}") from e

    if pd.isna(ts):
        raise ValueError(f"Invalid timestamp: {value!r}")

    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def to_epoch_ms(value: Any) -> int:
    """Absolute milliseconds since the epoch."""
    return parse_time(value).value // 1_000_000


def epoch_ms_array(values) -> np.ndarray:
    """Vector of epoch milliseconds, one per timestamp."""
    return np.array([to_epoch_ms(v) for v in values], dtype=np.int64)


# ============================================================================
# Dataclass representations (lightweight, no Pydantic)
# ============================================================================


@dataclass(frozen=True)
class ForecastPoint:
    """One forecast sample: significant wave height (m) and peak period (s)."""

    timestamp: str
    wave_height: float
    wave_period: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForecastPoint":
        assert_required_fields(data, ForecastFields.all(), "forecast point")
        return cls(
            timestamp=data[ForecastFields.TIMESTAMP],
            wave_height=float(data[ForecastFields.WAVE_HEIGHT]),
            wave_period=float(data[ForecastFields.WAVE_PERIOD]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "wave_height": self.wave_height,
            "wave_period": self.wave_period,
        }


@dataclass(frozen=True)
class WeatherLimits:
    """Per-task envelope: Hs upper bound (m) and open Tp interval (s)."""

    hs: float
    tp: Tuple[float, float]

    @property
    def tp_min(self) -> float:
        return self.tp[0]

    @property
    def tp_max(self) -> float:
        return self.tp[1]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherLimits":
        assert_required_fields(data, LimitFields.all(), "weatherLimits")
        tp = data[LimitFields.TP]
        if len(tp) != 2:
            raise ValueError(f"weatherLimits.Tp must be a [min, max] pair, got {tp!r}")
        return cls(hs=float(data[LimitFields.HS]), tp=(float(tp[0]), float(tp[1])))

    def to_dict(self) -> Dict[str, Any]:
        return {"Hs": self.hs, "Tp": [self.tp[0], self.tp[1]]}


@dataclass(frozen=True)
class Task:
    """A scheduled marine operation with its calendar window and limits."""

    id: str
    name: str
    start_date: str
    end_date: str
    duration: float  # days, advisory
    weather_limits: WeatherLimits
    level: int = 1
    parent_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        assert_required_fields(data, TaskFields.all(), f"task {data.get('id', '?')}")
        return cls(
            id=str(data[TaskFields.ID]),
            name=data[TaskFields.NAME],
            start_date=data[TaskFields.START_DATE],
            end_date=data[TaskFields.END_DATE],
            duration=data[TaskFields.DURATION],
            weather_limits=WeatherLimits.from_dict(data[TaskFields.WEATHER_LIMITS]),
            level=data.get(TaskFields.LEVEL, 1),
            parent_id=data.get(TaskFields.PARENT_ID, ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "parentId": self.parent_id,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "duration": self.duration,
            "weatherLimits": self.weather_limits.to_dict(),
        }


@dataclass
class Project:
    """A project and the ordered tasks it owns."""

    id: str
    name: str
    tasks: List[Task]
    description: str = ""
    location: Dict[str, Any] = field(default_factory=dict)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    project_manager: str = ""
    marine_coordinator: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        assert_required_fields(data, ["id", "name", "tasks"], "project")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            tasks=[Task.from_dict(t) for t in data["tasks"]],
            description=data.get("description", ""),
            location=data.get("location", {}),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            project_manager=data.get("projectManager", ""),
            marine_coordinator=data.get("marineCoordinator", ""),
            version=data.get("version", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "projectManager": self.project_manager,
            "marineCoordinator": self.marine_coordinator,
            "version": self.version,
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass
class ProjectData:
    """Top-level project.json: metadata and vessels pass through untouched."""

    projects: List[Project]
    metadata: Dict[str, Any] = field(default_factory=dict)
    vessels: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectData":
        assert_required_fields(data, ["projects"], "project document")
        return cls(
            projects=[Project.from_dict(p) for p in data["projects"]],
            metadata=data.get("metadata", {}),
            vessels=data.get("vessels", []),
        )

    def find_project(self, project_id: Optional[str] = None) -> Project:
        """First project, or the one with the given id."""
        if not self.projects:
            raise ValueError("Project document contains no projects")
        if project_id is None:
            return self.projects[0]
        for project in self.projects:
            if project.id == str(project_id):
                return project
        raise ValueError(f"Project not found: {project_id}")


@dataclass
class WeatherForecast:
    """Forecast document: location passes through, points feed the engine."""

    location: Dict[str, float]
    forecast: List[ForecastPoint]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherForecast":
        assert_required_fields(data, ["forecast"], "forecast document")
        return cls(
            location=data.get("location", {}),
            forecast=[ForecastPoint.from_dict(p) for p in data["forecast"]],
        )


@dataclass(frozen=True)
class HighlightRange:
    """Inclusive index window into a forecast sequence."""

    start: int
    end: int

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}


# ============================================================================
# Loaders
# ============================================================================


def parse_project_document(
    document: Dict[str, Any], project_id: Optional[str] = None
) -> Project:
    """Select a project from a ProjectData document (or a bare project object).

    Args:
        document: Decoded project.json
        project_id: Project to select (default: first project)

    Returns:
        Project with parsed tasks
    """
    if "projects" not in document:
        project = Project.from_dict(document)
        if project_id is not None and project.id != str(project_id):
            raise ValueError(f"Project not found: {project_id}")
        return project

    return ProjectData.from_dict(document).find_project(project_id)


def load_project(path: Path, project_id: Optional[str] = None) -> Project:
    """Load and validate a project from project.json."""
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)

    project = parse_project_document(document, project_id)
    validate_project(project)
    return project


def load_forecast(path: Path) -> WeatherForecast:
    """Load and validate forecast.json."""
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)

    weather = WeatherForecast.from_dict(document)
    validate_forecast(weather.forecast)
    return weather


def forecast_frame(forecast: List[ForecastPoint]) -> pd.DataFrame:
    """Forecast as a DataFrame with a parsed UTC ``ts`` column."""
    df = pd.DataFrame(
        [p.to_dict() for p in forecast], columns=ForecastFields.all()
    )
    df["ts"] = [parse_time(t) for t in df[ForecastFields.TIMESTAMP]]
    df["ts"] = pd.to_datetime(df["ts"], utc=True)
    return df


# ============================================================================
# Validation helpers
# ============================================================================


def assert_required_fields(
    record: Dict[str, Any], expected: List[str], name: str = "record"
):
    """Raise if a document record lacks any expected field."""
    missing = [f for f in expected if f not in record]
    if missing:
        raise ValueError(f"{name} missing required fields: {missing}")


def _check_finite(value: float, label: str) -> None:
    if not math.isfinite(value):
        raise ValueError(f"{label} must be finite, got {value}")


def validate_forecast(forecast: List[ForecastPoint]) -> None:
    """Validate forecast points: finite non-negative values, strictly increasing time."""
    df = forecast_frame(forecast)

    for col in (ForecastFields.WAVE_HEIGHT, ForecastFields.WAVE_PERIOD):
        values = df[col].astype(float)
        if not np.isfinite(values).all():
            raise ValueError(f"forecast.json: {col} must be finite")
        if (values < 0).any():
            raise ValueError(f"forecast.json: {col} must be >= 0")

    if not (df["ts"].is_monotonic_increasing and df["ts"].is_unique):
        raise ValueError("forecast.json: timestamps must be strictly increasing")


def validate_limits(limits: WeatherLimits, task_id: str) -> None:
    """Validate a task envelope: Hs > 0, Tp.min < Tp.max, all finite."""
    _check_finite(limits.hs, f"task {task_id}: Hs")
    _check_finite(limits.tp_min, f"task {task_id}: Tp min")
    _check_finite(limits.tp_max, f"task {task_id}: Tp max")
    if limits.hs <= 0:
        raise ValueError(f"task {task_id}: Hs must be > 0, got {limits.hs}")
    if limits.tp_min >= limits.tp_max:
        raise ValueError(
            f"task {task_id}: Tp min must be < max, got {list(limits.tp)}"
        )


def validate_project(project: Project) -> None:
    """Validate project tasks: unique ids, sane windows and limits."""
    ids = [t.id for t in project.tasks]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"project.json: task ids must be unique, duplicated: {duplicates}")

    for task in project.tasks:
        if parse_time(task.start_date) > parse_time(task.end_date):
            raise ValueError(f"task {task.id}: startDate must be <= endDate")
        validate_limits(task.weather_limits, task.id)
