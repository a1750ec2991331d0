"""Go/No-Go feasibility evaluation for a task against one forecast sample.

Decision order (first match wins):
    1. h >= Hs                          -> NO-GO (wave height)
    2. p <= Tmin or p >= Tmax           -> NO-GO (wave period, open interval)
    3. h >= caution_ratio * Hs          -> CAUTION (wave height)
    4. p <= Tmin + tol or p >= Tmax - tol -> CAUTION (wave period)
    5. otherwise                        -> GO

CAUTION verdicts have can_proceed=True and carry the literal "CAUTION"
token in the reason; presentation code detects it by substring.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from seastate.schema import ForecastPoint, Task
from seastate.tasks import format_fixed, format_number

CAUTION_RATIO = 0.8
PERIOD_TOLERANCE_S = 1.0

CAUTION_TOKEN = "CAUTION"
NO_DATA = "No Data"


class Decision(str, Enum):
    GO = "GO"
    CAUTION = "CAUTION"
    NO_GO = "NO-GO"


@dataclass(frozen=True)
class GoNoGoStatus:
    """Verdict for one task, with the forecast sample that informed it."""

    can_proceed: bool
    reason: str
    task_id: str
    timestamp: str
    decision: Decision = Decision.GO
    limit: Optional[str] = None  # "wave_height" | "wave_period" | None

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: {canProceed, reason, taskId, timestamp}."""
        return {
            "canProceed": self.can_proceed,
            "reason": self.reason,
            "taskId": self.task_id,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GoNoGoStatus":
        """Rebuild a verdict from its wire form, recovering the decision tag."""
        can_proceed = bool(data["canProceed"])
        reason = data["reason"]
        if not can_proceed:
            decision = Decision.NO_GO
        elif CAUTION_TOKEN in reason:
            decision = Decision.CAUTION
        else:
            decision = Decision.GO
        return cls(
            can_proceed=can_proceed,
            reason=reason,
            task_id=data["taskId"],
            timestamp=data["timestamp"],
            decision=decision,
        )


def check_task_feasibility(
    task: Task,
    current_weather: ForecastPoint,
    caution_ratio: float = CAUTION_RATIO,
    period_tolerance: float = PERIOD_TOLERANCE_S,
) -> GoNoGoStatus:
    """Evaluate a task's weather limits against one forecast sample.

    Hs is inclusive on the NO-GO side (h == Hs is NO-GO). The Tp bounds are
    open: p == Tmin and p == Tmax are both NO-GO.

    Args:
        task: Task with weather limits
        current_weather: Forecast sample (usually nearest the task start)
        caution_ratio: Fraction of Hs at which CAUTION starts
        period_tolerance: Seconds inside the Tp bounds flagged as CAUTION

    Returns:
        GoNoGoStatus echoing task.id and the sample timestamp
    """
    h = current_weather.wave_height
    p = current_weather.wave_period
    hs = task.weather_limits.hs
    tp_min, tp_max = task.weather_limits.tp

    caution_threshold = hs * caution_ratio
    hs_text = format_number(hs)
    tp_text = f"{format_number(tp_min)}-{format_number(tp_max)}"

    def verdict(can_proceed, reason, decision, limit=None):
        return GoNoGoStatus(
            can_proceed=can_proceed,
            reason=reason,
            task_id=task.id,
            timestamp=current_weather.timestamp,
            decision=decision,
            limit=limit,
        )

    if h >= hs:
        return verdict(
            False,
            f"Wave height ({format_fixed(h)}m) exceeds limit ({hs_text}m)",
            Decision.NO_GO,
            "wave_height",
        )

    if p <= tp_min or p >= tp_max:
        return verdict(
            False,
            f"Wave period ({format_fixed(p)}s) outside acceptable range ({tp_text}s)",
            Decision.NO_GO,
            "wave_period",
        )

    if h >= caution_threshold:
        return verdict(
            True,
            f"CAUTION: Wave height ({format_fixed(h)}m) approaching limit ({hs_text}m)",
            Decision.CAUTION,
            "wave_height",
        )

    if p <= tp_min + period_tolerance or p >= tp_max - period_tolerance:
        return verdict(
            True,
            f"CAUTION: Wave period ({format_fixed(p)}s) near range limits ({tp_text}s)",
            Decision.CAUTION,
            "wave_period",
        )

    return verdict(
        True,
        f"GO: Wave height {format_fixed(h)}m, period {format_fixed(p)}s - within limits",
        Decision.GO,
    )


# ============================================================================
# Projections for presentation
# ============================================================================


def is_caution(status: GoNoGoStatus) -> bool:
    return status.can_proceed and CAUTION_TOKEN in status.reason


def is_no_go(status: GoNoGoStatus) -> bool:
    return not status.can_proceed


def status_text(status: Optional[GoNoGoStatus]) -> str:
    """GO / CAUTION / NO-GO, or "No Data" when there is no verdict."""
    if status is None:
        return NO_DATA
    if not status.can_proceed:
        return Decision.NO_GO.value
    return Decision.CAUTION.value if is_caution(status) else Decision.GO.value


STATUS_COLORS = {
    Decision.GO.value: "success",
    Decision.CAUTION.value: "warning",
    Decision.NO_GO.value: "error",
    NO_DATA: "default",
}


def status_color(status: Optional[GoNoGoStatus]) -> str:
    """success / warning / error, or "default" when there is no verdict."""
    return STATUS_COLORS[status_text(status)]


def formatted_reason(status: GoNoGoStatus) -> str:
    """Reason for display; NO-GO verdicts get a "NO-GO: " prefix."""
    if not status.can_proceed:
        return f"NO-GO: {status.reason}"
    return status.reason
