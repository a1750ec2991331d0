"""Forecast-to-task temporal alignment.

Picks the forecast sample that informs a task's verdict and the index
window of samples overlapping the task. Comparisons are on absolute
epoch milliseconds; the forecast is assumed chronological.
"""

from typing import List, Optional

import numpy as np

from seastate.schema import (
    ForecastPoint,
    HighlightRange,
    Task,
    epoch_ms_array,
    to_epoch_ms,
)


def _forecast_times(forecast: List[ForecastPoint]) -> np.ndarray:
    return epoch_ms_array(p.timestamp for p in forecast)


def get_weather_for_task(
    forecast: List[ForecastPoint], task: Task
) -> Optional[ForecastPoint]:
    """Return the forecast point nearest in time to the task start.

    Ties go to the earlier point in the sequence. Only the start matters;
    the rest of the task window is ignored.

    Returns:
        Nearest ForecastPoint, or None for an empty forecast
    """
    if not forecast:
        return None

    times = _forecast_times(forecast)
    diffs = np.abs(times - to_epoch_ms(task.start_date))

    # argmin returns the first occurrence of the minimum
    return forecast[int(np.argmin(diffs))]


def get_highlighted_range(
    selected_task: Optional[Task], forecast: List[ForecastPoint]
) -> Optional[HighlightRange]:
    """Index window of forecast samples with startDate <= ts <= endDate.

    start is the first sample at or after startDate; end is one before the
    first sample strictly after endDate (or the last sample). The upper
    check is strict, so a sample exactly at endDate is included.

    Returns:
        HighlightRange, or None when no task is selected or no sample falls
        inside the window
    """
    if selected_task is None or not forecast:
        return None

    times = _forecast_times(forecast)
    task_start = to_epoch_ms(selected_task.start_date)
    task_end = to_epoch_ms(selected_task.end_date)

    at_or_after_start = np.flatnonzero(times >= task_start)
    if len(at_or_after_start) == 0:
        return None

    past_end = np.flatnonzero(times > task_end)
    start = int(at_or_after_start[0])
    end = int(past_end[0]) - 1 if len(past_end) > 0 else len(forecast) - 1

    # Window falls between two samples: nothing overlaps
    if end < start:
        return None

    return HighlightRange(start=start, end=end)
