"""Streamlit UI for SeaState Go/No-Go.

Single-page app showing:
- Project timeline with per-task GO / CAUTION / NO-GO chips
- Wave height and period charts, zoomable onto the selected task
- Range stats for the task window
"""

import pandas as pd
import streamlit as st

from seastate.aggregate import StatusAggregationError, compute_statuses, load_documents
from seastate.align import get_highlighted_range
from seastate.config import get_config
from seastate.feasibility import formatted_reason, is_no_go, status_text
from seastate.tasks import (
    find_task_by_id,
    get_task_description,
    get_task_duration_text,
    get_wave_height_limit_text,
    get_wave_period_limit_text,
    sort_tasks_by_start_date,
)
from seastate.windows import get_filtered_weather_data, get_weather_range_stats

CHIP_ICONS = {"GO": "🟢", "CAUTION": "🟠", "NO-GO": "🔴", "No Data": "⚪"}
ALL_TASKS = "__all__"


def render_timeline(tasks, statuses):
    st.subheader("Project Timeline")
    for task in tasks:
        status = statuses.get(task.id)
        text = status_text(status)
        col_name, col_window, col_status = st.columns([3, 3, 2])
        col_name.markdown(f"**{task.name}**  \n{get_task_description(task.name)}")
        col_window.caption(
            f"{task.start_date} → {task.end_date} "
            f"({get_task_duration_text(task.duration)})  \n"
            f"{get_wave_height_limit_text(task.weather_limits.hs)} · "
            f"{get_wave_period_limit_text(task.weather_limits.tp)}"
        )
        col_status.markdown(f"{CHIP_ICONS[text]} **{text}**")


def render_forecast(weather, task, statuses, zoomed):
    config = get_config()
    st.subheader("Wave Forecast")

    highlight = get_highlighted_range(task, weather.forecast)
    series = get_filtered_weather_data(
        weather.forecast,
        task,
        highlight,
        is_zoomed=zoomed,
        is_small_screen=False,
        min_padding=config.min_padding,
        padding_fraction=config.padding_fraction,
    )

    if not series.wave_heights:
        st.info("No forecast data available.")
        return

    chart_df = pd.DataFrame(
        {
            "Wave height (m)": series.wave_heights,
            "Wave period (s)": series.wave_periods,
        },
        index=series.timestamps,
    )
    st.line_chart(chart_df[["Wave height (m)"]])
    st.line_chart(chart_df[["Wave period (s)"]])

    stats = get_weather_range_stats(
        weather.forecast, task, highlight, series.wave_heights, series.wave_periods
    )
    col_h, col_p = st.columns(2)
    col_h.metric("Wave height range", f"{stats.height_min:.1f}-{stats.height_max:.1f} m")
    col_p.metric("Wave period range", f"{stats.period_min:.1f}-{stats.period_max:.1f} s")

    if task is not None:
        status = statuses.get(task.id)
        if status is None:
            st.info("No Data")
        elif is_no_go(status):
            st.error(formatted_reason(status))
        elif status_text(status) == "CAUTION":
            st.warning(formatted_reason(status))
        else:
            st.success(formatted_reason(status))


def show_error(message):
    st.error(message)
    if st.button("Refresh"):
        st.rerun()


def main():
    """Main Streamlit app entry point."""
    config = get_config()
    st.set_page_config(page_title=config.project_name, page_icon="🌊", layout="wide")

    st.title(f"🌊 {config.project_name}")

    try:
        project, weather = load_documents()
    except (OSError, ValueError) as e:
        show_error(f"Data error: {e}")
        return

    st.markdown(f"**{project.name}** · {project.description}")

    try:
        statuses = compute_statuses(project, weather)
    except StatusAggregationError as e:
        show_error(f"Calculation error: {e}")
        return

    tasks = sort_tasks_by_start_date(project.tasks)
    render_timeline(tasks, statuses)

    options = [ALL_TASKS] + [t.id for t in tasks]
    labels = {t.id: f"{t.name} ({t.id})" for t in tasks}
    selected_id = st.selectbox(
        "Task",
        options,
        format_func=lambda v: "All tasks" if v == ALL_TASKS else labels[v],
        key="task",
    )
    zoomed = st.toggle("Zoom to task", value=False, key="zoomed")

    task = None if selected_id == ALL_TASKS else find_task_by_id(tasks, selected_id)
    render_forecast(weather, task, statuses, zoomed)


if __name__ == "__main__":
    main()
