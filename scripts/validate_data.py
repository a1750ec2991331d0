"""Validate the configured project and forecast documents."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from seastate.align import get_highlighted_range
from seastate.config import get_config
from seastate.schema import forecast_frame, load_forecast, load_project
from seastate.tasks import get_task_type


def main():
    """Load and validate both data documents."""
    print("=" * 80)
    print("SeaState Data Validation (validate_data.py)")
    print("=" * 80)

    config = get_config()

    print("\n📂 Loading documents...")

    try:
        project = load_project(config.project_file, config.project_id)
        print(f"  ✅ {config.project_file.name}: {len(project.tasks)} tasks")
    except (OSError, ValueError) as e:
        print(f"  ❌ {config.project_file.name}: {e}")
        return 1

    try:
        weather = load_forecast(config.forecast_file)
        print(f"  ✅ {config.forecast_file.name}: {len(weather.forecast)} points")
    except (OSError, ValueError) as e:
        print(f"  ❌ {config.forecast_file.name}: {e}")
        return 1

    if not weather.forecast:
        print("  ❌ forecast is empty")
        return 1

    # Forecast coverage
    df = forecast_frame(weather.forecast)
    print("\n📊 Forecast:")
    print(f"  First sample: {df['ts'].min()}")
    print(f"  Last sample:  {df['ts'].max()}")
    spacing = df["ts"].diff().dropna()
    if len(spacing) > 0:
        print(f"  Spacing: {spacing.min()} .. {spacing.max()}")
    print(f"  Wave height: {df['wave_height'].min():.1f}-{df['wave_height'].max():.1f} m")
    print(f"  Wave period: {df['wave_period'].min():.1f}-{df['wave_period'].max():.1f} s")

    # Task coverage
    print("\n📋 Tasks:")
    uncovered = 0
    for task in project.tasks:
        highlight = get_highlighted_range(task, weather.forecast)
        if highlight is None:
            uncovered += 1
            samples = "no samples"
        else:
            samples = f"samples {highlight.start}..{highlight.end}"
        print(f"  {task.id:<14} {get_task_type(task.name):<13} {samples}")

    if uncovered:
        print(f"\n  ⚠️  {uncovered} task(s) without forecast samples in their window")

    print("\n" + "=" * 80)
    print("✅ All validation checks passed!")
    print("=" * 80)

    return 0


if __name__ == "__main__":
    sys.exit(main())
