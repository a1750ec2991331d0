"""Unit tests for forecast-to-task alignment."""

import pytest

from seastate.align import get_highlighted_range, get_weather_for_task
from seastate.schema import ForecastPoint, HighlightRange, Task, WeatherLimits, parse_time


def make_task(start, end, task_id="t1"):
    return Task(
        id=task_id,
        name="INSTALLATION TASK 1",
        start_date=start,
        end_date=end,
        duration=1,
        weather_limits=WeatherLimits(hs=3.0, tp=(8, 12)),
    )


def make_forecast(timestamps):
    return [
        ForecastPoint(timestamp=ts, wave_height=1.0 + i, wave_period=9.0 + i)
        for i, ts in enumerate(timestamps)
    ]


@pytest.fixture
def forecast():
    return make_forecast(
        [
            "2025-09-06T10:00:00Z",
            "2025-09-06T12:00:00Z",
            "2025-09-06T14:00:00Z",
        ]
    )


# 1. Nearest sample


class TestGetWeatherForTask:
    def test_empty_forecast_returns_none(self):
        task = make_task("2025-09-06T12:00:00Z", "2025-09-06T18:00:00Z")
        assert get_weather_for_task([], task) is None

    def test_exact_match(self, forecast):
        task = make_task("2025-09-06T12:00:00Z", "2025-09-06T18:00:00Z")
        assert get_weather_for_task(forecast, task) == forecast[1]

    def test_closest_when_no_exact_match(self, forecast):
        task = make_task("2025-09-06T12:50:00Z", "2025-09-06T18:00:00Z")
        assert get_weather_for_task(forecast, task) == forecast[1]

    def test_tie_goes_to_earlier_point(self, forecast):
        """13:00 is equidistant from 12:00 and 14:00."""
        task = make_task("2025-09-06T13:00:00Z", "2025-09-06T18:00:00Z")
        assert get_weather_for_task(forecast, task) == forecast[1]

    def test_single_point(self, forecast):
        task = make_task("2025-12-01T00:00:00Z", "2025-12-02T00:00:00Z")
        assert get_weather_for_task(forecast[:1], task) == forecast[0]

    def test_start_before_and_after_forecast(self, forecast):
        early = make_task("2025-09-01T00:00:00Z", "2025-09-02T00:00:00Z")
        late = make_task("2025-10-01T00:00:00Z", "2025-10-02T00:00:00Z")
        assert get_weather_for_task(forecast, early) == forecast[0]
        assert get_weather_for_task(forecast, late) == forecast[-1]

    def test_date_only_start_is_midnight_utc(self):
        forecast = make_forecast(
            ["2025-08-23T18:00:00Z", "2025-08-24T00:00:00Z", "2025-08-24T06:00:00Z"]
        )
        task = make_task("2025-08-24", "2025-08-26")
        assert get_weather_for_task(forecast, task) == forecast[1]


# 2. Overlap range


class TestGetHighlightedRange:
    @pytest.fixture
    def day_forecast(self):
        return make_forecast(
            [
                "2025-01-10T08:00:00Z",
                "2025-01-10T12:00:00Z",
                "2025-01-10T16:00:00Z",
                "2025-01-10T20:00:00Z",
            ]
        )

    def test_samples_inside_window(self, day_forecast):
        task = make_task("2025-01-10T10:00:00Z", "2025-01-10T18:00:00Z")
        assert get_highlighted_range(task, day_forecast) == HighlightRange(1, 2)

    def test_sample_at_end_date_is_included(self, day_forecast):
        task = make_task("2025-01-10T10:00:00Z", "2025-01-10T16:00:00Z")
        assert get_highlighted_range(task, day_forecast) == HighlightRange(1, 2)

    def test_sample_at_start_date_is_included(self, day_forecast):
        task = make_task("2025-01-10T08:00:00Z", "2025-01-10T09:00:00Z")
        assert get_highlighted_range(task, day_forecast) == HighlightRange(0, 0)

    def test_window_running_past_forecast_end(self, day_forecast):
        task = make_task("2025-01-10T15:00:00Z", "2025-01-12T00:00:00Z")
        assert get_highlighted_range(task, day_forecast) == HighlightRange(2, 3)

    def test_task_after_forecast_returns_none(self, day_forecast):
        task = make_task("2025-01-11T00:00:00Z", "2025-01-12T00:00:00Z")
        assert get_highlighted_range(task, day_forecast) is None

    def test_window_between_samples_returns_none(self, day_forecast):
        task = make_task("2025-01-10T09:00:00Z", "2025-01-10T11:00:00Z")
        assert get_highlighted_range(task, day_forecast) is None

    def test_no_task_or_empty_forecast(self, day_forecast):
        task = make_task("2025-01-10T10:00:00Z", "2025-01-10T18:00:00Z")
        assert get_highlighted_range(None, day_forecast) is None
        assert get_highlighted_range(task, []) is None

    def test_every_index_lies_inside_window(self):
        """All highlighted samples satisfy start <= ts <= end."""
        forecast = make_forecast(
            [f"2025-08-{d:02d}T{h:02d}:00:00Z" for d in range(24, 31) for h in (0, 6, 12, 18)]
        )
        task = make_task("2025-08-26", "2025-08-28")

        highlight = get_highlighted_range(task, forecast)

        assert highlight is not None
        start, end = parse_time(task.start_date), parse_time(task.end_date)
        for i in range(highlight.start, highlight.end + 1):
            assert start <= parse_time(forecast[i].timestamp) <= end
        # 26T00..27T18 plus 28T00 exactly at endDate
        assert (highlight.start, highlight.end) == (8, 16)
