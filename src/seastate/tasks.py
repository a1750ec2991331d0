"""Task classification, lookups and display text.

Task type is derived from the task name by case-sensitive keyword search;
the earliest match in the name wins, ties go to STORM > PREP > INSTALLATION.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from seastate.schema import Task, parse_time

STORM = "STORM"
PREP = "PREP"
INSTALLATION = "INSTALLATION"
OTHER = "OTHER"

# Search order doubles as the tie-break priority
TASK_KEYWORDS = [
    (STORM, "STORM"),
    (PREP, "PREP"),
    (INSTALLATION, "INSTALLATION"),
]

TASK_DESCRIPTIONS = {
    STORM: "Vessel maintaining position during adverse weather conditions",
    PREP: "Preparation activities for installation operations",
    INSTALLATION: "Active installation of riser components on offshore platform",
    OTHER: "Marine operation visualization",
}

TASK_ICONS = {
    STORM: "storm",
    PREP: "engineering",
    INSTALLATION: "build",
    OTHER: "schedule",
}

TASK_IMAGES = {
    "INSTALLATION TASK 1": "Task1.png",
    "INSTALLATION TASK 2": "Task2.png",
    "INSTALLATION TASK 3": "Task3.png",
}


def get_task_type(task_name: str) -> str:
    """Classify a task name as STORM, PREP, INSTALLATION or OTHER.

    No normalisation is applied: "storm riding" is OTHER.
    """
    earliest_type = None
    earliest_pos = -1

    for task_type, keyword in TASK_KEYWORDS:
        pos = task_name.find(keyword)
        if pos == -1:
            continue
        # Strict < keeps the earlier keyword on equal positions
        if earliest_type is None or pos < earliest_pos:
            earliest_type = task_type
            earliest_pos = pos

    return earliest_type if earliest_type is not None else OTHER


def get_task_description(task_name: str) -> str:
    return TASK_DESCRIPTIONS[get_task_type(task_name)]


def get_task_icon(task_name: str) -> str:
    """Icon category for the task type (storm/engineering/build/schedule)."""
    return TASK_ICONS[get_task_type(task_name)]


def get_task_image(task_name: str) -> Optional[str]:
    """Illustration asset for the named installation tasks, if any."""
    return TASK_IMAGES.get(task_name)


def format_number(value: float) -> str:
    """Render a static number at native precision (3.0 -> "3", 2.5 -> "2.5")."""
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def format_fixed(value: float, digits: int = 1) -> str:
    """Fixed-point text with ties rounded away from zero (1.25 -> "1.3").

    Decimal(value) is the float's exact binary value, so 2.35 (stored just
    above 2.35) also rounds up while 0.15 (stored just below) rounds down.
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def get_task_duration_text(duration: float) -> str:
    suffix = "" if duration == 1 else "s"
    return f"{format_number(duration)} day{suffix}"


def get_wave_height_limit_text(limit: float) -> str:
    return f"Wave Height ≤ {format_number(limit)}m"


def get_wave_period_limit_text(tp_range) -> str:
    return f"Period: {format_number(tp_range[0])}-{format_number(tp_range[1])}s"


def sort_tasks_by_start_date(tasks: List[Task]) -> List[Task]:
    """Return a new list ordered by start time; equal starts keep input order."""
    return sorted(tasks, key=lambda t: parse_time(t.start_date))


def find_task_by_id(tasks: List[Task], task_id: str) -> Optional[Task]:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def is_task_active(task: Task, now: Optional[datetime] = None) -> bool:
    """True iff now lies in [startDate, endDate], both ends inclusive.

    Note the closed upper bound; forecast overlap uses a strict > on endDate
    to find the first sample past the window, which yields the same closed
    interval on discrete samples.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    now_ts = parse_time(now)
    return parse_time(task.start_date) <= now_ts <= parse_time(task.end_date)
