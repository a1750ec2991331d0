"""Chart windowing over the forecast for a selected task.

- get_filtered_weather_data: full forecast, or the task window padded by
  max(min_padding, floor(padding_fraction * (end - start))) samples
- get_weather_range_stats: min/max wave height and period for the view
- find_task_by_data_index: map a chart index back to the task under it
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from seastate.schema import (
    ForecastPoint,
    HighlightRange,
    Task,
    parse_time,
    to_epoch_ms,
)

MIN_PADDING = 2
PADDING_FRACTION = 0.2

# English regardless of the process locale
MONTH_ABBR = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass
class WindowedSeries:
    """Parallel series for a chart plus where they sit in the forecast."""

    wave_heights: List[float]
    wave_periods: List[float]
    timestamps: List[str]
    data_range: HighlightRange
    filtered_range: Optional[HighlightRange] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "waveHeights": self.wave_heights,
            "wavePeriods": self.wave_periods,
            "timestamps": self.timestamps,
            "dataRange": self.data_range.to_dict(),
        }
        if self.filtered_range is not None:
            result["filteredRange"] = self.filtered_range.to_dict()
        return result


@dataclass
class RangeStats:
    height_min: float
    height_max: float
    period_min: float
    period_max: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "heightMin": self.height_min,
            "heightMax": self.height_max,
            "periodMin": self.period_min,
            "periodMax": self.period_max,
        }


def format_timestamp(timestamp: str) -> str:
    """Render a timestamp as e.g. "Sep 6, 12:30 PM" (English, UTC)."""
    ts = parse_time(timestamp)
    hour = ts.hour % 12 or 12
    meridiem = "AM" if ts.hour < 12 else "PM"
    return f"{MONTH_ABBR[ts.month - 1]} {ts.day}, {hour:02d}:{ts.minute:02d} {meridiem}"


def format_chart_timestamp(timestamp: str, is_small_screen: bool = False) -> str:
    """Chart axis label: "HH:mm" on small screens, "MMM dd HH:mm" otherwise (UTC)."""
    ts = parse_time(timestamp)
    clock = f"{ts.hour:02d}:{ts.minute:02d}"
    if is_small_screen:
        return clock
    return f"{MONTH_ABBR[ts.month - 1]} {ts.day:02d} {clock}"


def _project(points: List[ForecastPoint], is_small_screen: bool):
    wave_heights = [p.wave_height for p in points]
    wave_periods = [p.wave_period for p in points]
    timestamps = [format_chart_timestamp(p.timestamp, is_small_screen) for p in points]
    return wave_heights, wave_periods, timestamps


def get_filtered_weather_data(
    forecast: List[ForecastPoint],
    selected_task: Optional[Task],
    highlight_range: Optional[HighlightRange],
    is_zoomed: bool,
    is_small_screen: bool,
    min_padding: int = MIN_PADDING,
    padding_fraction: float = PADDING_FRACTION,
) -> WindowedSeries:
    """Project the forecast into the series a chart should display.

    Unzoomed (or without task/highlight) the whole forecast is returned and
    filtered_range is None. Zoomed, the highlight is padded on both sides
    and clamped to the forecast; filtered_range gives the highlight's
    position inside the returned slice.

    Args:
        forecast: Chronological forecast points
        selected_task: Task in focus, if any
        highlight_range: Task overlap window from get_highlighted_range
        is_zoomed: Whether the viewer asked for a task-centred slice
        is_small_screen: Use the short "HH:mm" label format
        min_padding: Minimum samples of padding either side
        padding_fraction: Padding as a fraction of the highlight span

    Returns:
        WindowedSeries
    """
    if selected_task is None or highlight_range is None or not is_zoomed:
        wave_heights, wave_periods, timestamps = _project(forecast, is_small_screen)
        return WindowedSeries(
            wave_heights=wave_heights,
            wave_periods=wave_periods,
            timestamps=timestamps,
            data_range=HighlightRange(start=0, end=len(forecast) - 1),
        )

    span = highlight_range.end - highlight_range.start
    padding = max(min_padding, math.floor(span * padding_fraction))
    start_index = max(0, highlight_range.start - padding)
    end_index = min(len(forecast) - 1, highlight_range.end + padding)

    wave_heights, wave_periods, timestamps = _project(
        forecast[start_index : end_index + 1], is_small_screen
    )

    return WindowedSeries(
        wave_heights=wave_heights,
        wave_periods=wave_periods,
        timestamps=timestamps,
        data_range=HighlightRange(start=start_index, end=end_index),
        filtered_range=HighlightRange(
            start=highlight_range.start - start_index,
            end=highlight_range.end - start_index,
        ),
    )


def get_weather_range_stats(
    forecast: List[ForecastPoint],
    selected_task: Optional[Task],
    highlight_range: Optional[HighlightRange],
    wave_heights: List[float],
    wave_periods: List[float],
) -> RangeStats:
    """Min/max wave height and period over the task window or the shown series.

    With both a task and a highlight the stats cover
    forecast[highlight.start..highlight.end]; otherwise the supplied series.

    Raises:
        ValueError: if the selected data is empty
    """
    if selected_task is not None and highlight_range is not None:
        task_data = forecast[highlight_range.start : highlight_range.end + 1]
        heights = np.array([p.wave_height for p in task_data], dtype=float)
        periods = np.array([p.wave_period for p in task_data], dtype=float)
    else:
        heights = np.asarray(wave_heights, dtype=float)
        periods = np.asarray(wave_periods, dtype=float)

    if heights.size == 0 or periods.size == 0:
        raise ValueError("Cannot compute range stats over an empty window")

    return RangeStats(
        height_min=float(heights.min()),
        height_max=float(heights.max()),
        period_min=float(periods.min()),
        period_max=float(periods.max()),
    )


def find_task_by_data_index(
    index: int,
    forecast: List[ForecastPoint],
    tasks: List[Task],
    selected_task: Optional[Task],
    data_range: Optional[HighlightRange],
) -> Optional[Task]:
    """Return the first task whose [startDate, endDate] contains the sample at index.

    index is a position in the displayed series; when a task is selected and
    a data_range is known the series is a slice starting at data_range.start.
    """
    if not tasks:
        return None

    if selected_task is not None and data_range is not None:
        original_index = data_range.start + index
    else:
        original_index = index

    if original_index < 0 or original_index >= len(forecast):
        return None

    clicked = to_epoch_ms(forecast[original_index].timestamp)

    for task in tasks:
        if to_epoch_ms(task.start_date) <= clicked <= to_epoch_ms(task.end_date):
            return task

    return None
