"""Unit tests for task classification, lookups and display text."""

from datetime import datetime, timedelta, timezone

import pytest

from seastate.schema import Task, WeatherLimits
from seastate.tasks import (
    find_task_by_id,
    format_fixed,
    format_number,
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


def make_task(task_id, start, end="2025-09-10T00:00:00Z"):
    return Task(
        id=task_id,
        name="PREP WORK",
        start_date=start,
        end_date=end,
        duration=1,
        weather_limits=WeatherLimits(hs=3.0, tp=(5, 15)),
    )


# 1. Classification


class TestGetTaskType:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("STORM RIDING", "STORM"),
            ("PREP WORK", "PREP"),
            ("INSTALLATION TASK 3", "INSTALLATION"),
            ("Crew change", "OTHER"),
            ("", "OTHER"),
        ],
    )
    def test_keywords(self, name, expected):
        assert get_task_type(name) == expected

    def test_case_sensitive(self):
        assert get_task_type("storm riding") == "OTHER"
        assert get_task_type("Installation") == "OTHER"

    def test_earliest_keyword_wins(self):
        assert get_task_type("PREP FOR STORM") == "PREP"
        assert get_task_type("INSTALLATION PREP") == "INSTALLATION"
        assert get_task_type("STORM PREP") == "STORM"

    def test_keyword_inside_word(self):
        assert get_task_type("PREPARATION") == "PREP"


class TestTaskPresentation:
    def test_descriptions(self):
        assert get_task_description("STORM RIDING") == (
            "Vessel maintaining position during adverse weather conditions"
        )
        assert get_task_description("PREP WORK") == (
            "Preparation activities for installation operations"
        )
        assert get_task_description("INSTALLATION TASK 1") == (
            "Active installation of riser components on offshore platform"
        )
        assert get_task_description("Transit") == "Marine operation visualization"

    def test_icons(self):
        assert get_task_icon("STORM RIDING") == "storm"
        assert get_task_icon("PREP WORK") == "engineering"
        assert get_task_icon("INSTALLATION TASK 4") == "build"
        assert get_task_icon("Transit") == "schedule"

    def test_images(self):
        assert get_task_image("INSTALLATION TASK 1") == "Task1.png"
        assert get_task_image("INSTALLATION TASK 3") == "Task3.png"
        assert get_task_image("INSTALLATION TASK 5") is None

    def test_format_number(self):
        assert format_number(3.0) == "3"
        assert format_number(2.5) == "2.5"
        assert format_number(15) == "15"

    @pytest.mark.parametrize(
        "value,expected",
        [(1.25, "1.3"), (10.25, "10.3"), (2.0, "2.0"), (0.15, "0.1"), (2.35, "2.4"), (0, "0.0")],
    )
    def test_format_fixed(self, value, expected):
        assert format_fixed(value) == expected

    def test_duration_text(self):
        assert get_task_duration_text(1) == "1 day"
        assert get_task_duration_text(3) == "3 days"
        assert get_task_duration_text(0.5) == "0.5 days"

    def test_limit_text(self):
        assert get_wave_height_limit_text(2.5) == "Wave Height ≤ 2.5m"
        assert get_wave_height_limit_text(6.0) == "Wave Height ≤ 6m"
        assert get_wave_period_limit_text((5.0, 15.0)) == "Period: 5-15s"


# 2. Ordering and lookup


class TestSortAndFind:
    def test_sorts_by_start(self):
        tasks = [
            make_task("c", "2025-09-03T00:00:00Z"),
            make_task("a", "2025-09-01"),
            make_task("b", "2025-09-02T12:00:00Z"),
        ]
        assert [t.id for t in sort_tasks_by_start_date(tasks)] == ["a", "b", "c"]

    def test_equal_starts_keep_input_order(self):
        tasks = [
            make_task("x", "2025-09-02"),
            make_task("y", "2025-09-01"),
            make_task("z", "2025-09-02T00:00:00Z"),
        ]
        assert [t.id for t in sort_tasks_by_start_date(tasks)] == ["y", "x", "z"]

    def test_input_not_mutated(self):
        tasks = [make_task("b", "2025-09-02"), make_task("a", "2025-09-01")]
        sort_tasks_by_start_date(tasks)
        assert [t.id for t in tasks] == ["b", "a"]

    def test_empty(self):
        assert sort_tasks_by_start_date([]) == []

    def test_find_task_by_id(self):
        tasks = [make_task("a", "2025-09-01"), make_task("b", "2025-09-02")]
        assert find_task_by_id(tasks, "b") is tasks[1]
        assert find_task_by_id(tasks, "missing") is None


# 3. Activity


class TestIsTaskActive:
    @pytest.fixture
    def task(self):
        return make_task("t", "2025-09-06T12:00:00Z", "2025-09-06T18:00:00Z")

    def test_inside_window(self, task):
        now = datetime(2025, 9, 6, 15, 0, tzinfo=timezone.utc)
        assert is_task_active(task, now)

    def test_bounds_are_inclusive(self, task):
        assert is_task_active(task, datetime(2025, 9, 6, 12, 0, tzinfo=timezone.utc))
        assert is_task_active(task, datetime(2025, 9, 6, 18, 0, tzinfo=timezone.utc))

    def test_outside_window(self, task):
        assert not is_task_active(task, datetime(2025, 9, 6, 11, 59, tzinfo=timezone.utc))
        assert not is_task_active(task, datetime(2025, 9, 6, 18, 1, tzinfo=timezone.utc))

    def test_defaults_to_current_time(self):
        now = datetime.now(timezone.utc)
        current = make_task(
            "now",
            (now - timedelta(hours=1)).isoformat(),
            (now + timedelta(hours=1)).isoformat(),
        )
        finished = make_task(
            "done",
            (now - timedelta(days=2)).isoformat(),
            (now - timedelta(days=1)).isoformat(),
        )

        assert is_task_active(current)
        assert not is_task_active(finished)
