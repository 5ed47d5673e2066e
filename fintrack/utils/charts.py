# fintrack/utils/charts.py
"""
Chart payloads for the dashboard.

Every builder returns ``{chart_id, kind, labels, datasets}`` where each
dataset is ``{label, values, color_hint}``; the client only draws them.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fintrack.utils.aggregation import (
    bucketed_sums,
    cumulative,
    cumulative_by_entity,
    field,
    last_value_series,
    numeric,
    score_of,
    sort_by_time,
)
from fintrack.utils.bucketing import (
    Granularity,
    bucket_label,
    day_key,
    iter_day_keys,
    shift_day_key,
    start_of_relative_period,
)
from fintrack.utils.classifier import Category, KindClassifier
from fintrack.utils.metrics import (
    MetricsFormula,
    SummaryMetrics,
    derive_metrics,
    display_remaining_balance,
)
from fintrack.utils.projection import project

logger = logging.getLogger(__name__)

DELETED_GOAL_LABEL = "(deleted goal)"
TOTAL_SCORE_KEY = "total"

COLORS = {
    "income": "#3498db",
    "expense": "#e74c3c",
    "net_flow": "#2ecc71",
    "savings": "#f1c40f",
    "debt": "#e74c3c",
    "remaining": "#3498db",
    "score": "#9b59b6",
}


def chart(chart_id: str, kind: str, labels: Sequence[str], datasets: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"chart_id": chart_id, "kind": kind, "labels": list(labels), "datasets": datasets}


def dataset(label: str, values: Iterable[float], color_hint: Optional[str] = None) -> Dict[str, Any]:
    return {"label": label, "values": [round(v, 2) for v in values], "color_hint": color_hint}


# ────────────────────────────────────────────────────────────────────────────────
# CHART REGISTRY
# ────────────────────────────────────────────────────────────────────────────────
class ChartHandle:
    def __init__(self, chart_id: str, payload: Dict[str, Any], version: int):
        self.chart_id = chart_id
        self.payload = payload
        self.version = version
        self.disposed = False

    def dispose(self) -> None:
        self.disposed = True


class ChartRegistry:
    """Current chart per chart id; replacing disposes the previous handle."""

    def __init__(self):
        self._handles: Dict[str, ChartHandle] = {}

    def replace(self, chart_id: str, payload: Dict[str, Any]) -> ChartHandle:
        previous = self._handles.get(chart_id)
        version = 1
        if previous is not None:
            previous.dispose()
            version = previous.version + 1
        handle = ChartHandle(chart_id, payload, version)
        self._handles[chart_id] = handle
        return handle

    def get(self, chart_id: str) -> Optional[ChartHandle]:
        return self._handles.get(chart_id)

    def snapshot(self) -> List[Dict[str, Any]]:
        return [handle.payload for handle in self._handles.values()]

    def clear(self) -> None:
        for handle in self._handles.values():
            handle.dispose()
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._handles)


# ────────────────────────────────────────────────────────────────────────────────
# FINANCE
# ────────────────────────────────────────────────────────────────────────────────
def metric_cards(metrics: SummaryMetrics) -> List[Dict[str, Any]]:
    def tone(value):
        return "positive" if value >= 0 else "negative"

    return [
        {"key": "total_income", "title": "Total Income", "value": round(metrics.total_income, 2), "tone": "positive"},
        {"key": "total_expense", "title": "Total Expenses", "value": round(metrics.total_expense, 2), "tone": "negative"},
        {"key": "net_flow", "title": "Net Income (Income - Expenses)", "value": round(metrics.net_flow, 2), "tone": tone(metrics.net_flow)},
        {"key": "savings", "title": "Total Savings", "value": round(metrics.savings, 2), "tone": "positive"},
        {"key": "remaining_balance", "title": "Current Financial Balance",
         "value": round(display_remaining_balance(metrics), 2), "tone": tone(metrics.remaining_balance)},
    ]


def income_expense_chart(metrics: SummaryMetrics) -> Dict[str, Any]:
    return chart(
        "income_expense",
        "bar",
        ["Total Income", "Total Expenses"],
        [dataset("Amount", [metrics.total_income, metrics.total_expense], COLORS["income"])],
    )


def net_worth_chart(metrics: SummaryMetrics) -> Dict[str, Any]:
    # doughnut slices cannot be negative, clamp only here
    return chart(
        "net_worth",
        "doughnut",
        ["Remaining Balance", "Savings", "Debt"],
        [dataset("Breakdown", [display_remaining_balance(metrics), metrics.savings, metrics.debt], COLORS["remaining"])],
    )


def time_flow_chart(records: Iterable, granularity, classifier: KindClassifier) -> Dict[str, Any]:
    buckets = bucketed_sums(records, granularity, classifier)
    labels = [bucket_label(key, granularity) for key in buckets]
    net_flow = [
        cell.get(Category.income, 0.0) + cell.get(Category.bonus, 0.0) - cell.get(Category.expense, 0.0)
        for cell in buckets.values()
    ]
    savings = [cell.get(Category.savings, 0.0) for cell in buckets.values()]
    return chart(
        "time_flow",
        "line",
        labels,
        [
            dataset("Net Flow (Income - Expense)", net_flow, COLORS["net_flow"]),
            dataset("Savings Change", savings, COLORS["savings"]),
        ],
    )


def build_dashboard(
    records: Iterable,
    settings=None,
    period=Granularity.month,
    now: Optional[datetime] = None,
    classifier: Optional[KindClassifier] = None,
    formula: Optional[MetricsFormula] = None,
) -> Dict[str, Any]:
    """
    Full recomputation for one owner's finance dashboard.

    Pure function of the delivered record set: records older than the
    selected rolling period are ignored, everything else is refolded.
    """
    classifier = classifier or KindClassifier.from_scheme("unified")
    period = Granularity(period)
    since = start_of_relative_period(now, period)
    in_window = [r for r in records if numeric(field(r, "timestamp")) >= since]

    metrics = derive_metrics(in_window, settings, formula, classifier)
    logger.debug("Dashboard recomputed over %d records for period %s", len(in_window), period.value)
    return {
        "period": period.value,
        "since": since,
        "settings_configured": settings is not None,
        "metrics": metrics.as_dict(),
        "cards": metric_cards(metrics),
        "charts": [
            income_expense_chart(metrics),
            net_worth_chart(metrics),
            time_flow_chart(in_window, period, classifier),
        ],
    }


# ────────────────────────────────────────────────────────────────────────────────
# WINDOWED CUMULATIVE SERIES
# ────────────────────────────────────────────────────────────────────────────────
def display_window(
    history_dates: Sequence[str],
    start: Optional[str],
    end: Optional[str],
    max_days: Optional[int] = None,
) -> List[str]:
    """
    Day keys to show; defaults to the span of the computed history.
    With max_days set, only the most recent max_days days of the window are kept.
    """
    if not history_dates and not (start and end):
        return []
    start = start or min(history_dates)
    end = end or max(history_dates)
    if start > end:
        return []
    if max_days is not None:
        start = max(start, shift_day_key(end, 1 - max_days))
    return list(iter_day_keys(start, end))


def debt_progress_chart(
    log_entries: Iterable,
    start: Optional[str] = None,
    end: Optional[str] = None,
    max_days: Optional[int] = None,
) -> Dict[str, Any]:
    """Remaining debt per day, built from the full repayment log."""
    series = last_value_series(log_entries, lambda e: numeric(field(e, "remaining_debt")))
    history = list(series)
    window = display_window(history, start, end, max_days)
    values = project({"remaining": series}, history, window)["remaining"]
    return chart("debt_progress", "line", window, [dataset("Remaining Debt", values, COLORS["debt"])])


def goal_titles(goals: Iterable) -> Dict[str, str]:
    return {str(field(g, "id")): field(g, "title") for g in goals}


def resolve_goal_title(log, titles: Dict[str, str]) -> str:
    """Current goal title; placeholder when the goal no longer exists."""
    goal_id = field(log, "goal_id")
    if goal_id is not None and str(goal_id) in titles:
        return titles[str(goal_id)]
    return DELETED_GOAL_LABEL


def motivation_total(logs: Iterable) -> Dict[str, Any]:
    total = sum((score_of(log) for log in logs), 0.0)
    if total > 0:
        sign = "positive"
    elif total < 0:
        sign = "negative"
    else:
        sign = "neutral"
    return {"score": int(total) if float(total).is_integer() else total, "sign": sign}


def motivation_chart(
    logs: Iterable,
    goals: Iterable = (),
    start: Optional[str] = None,
    end: Optional[str] = None,
    max_days: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Cumulative motivation score over the full log history, shown on the
    requested day window: one overall series plus one per goal.
    """
    logs = sort_by_time(logs)
    titles = goal_titles(goals)

    series = {TOTAL_SCORE_KEY: cumulative(logs, value_fn=score_of)}
    series.update(cumulative_by_entity(logs, entity_fn=lambda log: str(field(log, "goal_id")), value_fn=score_of))
    history = sorted({day_key(field(log, "timestamp")) for log in logs})
    window = display_window(history, start, end, max_days)
    projected = project(series, history, window)

    datasets = [dataset("Cumulative Motivation Score", projected.pop(TOTAL_SCORE_KEY), COLORS["score"])]
    for goal_id, values in projected.items():
        label = titles.get(goal_id, DELETED_GOAL_LABEL)
        datasets.append(dataset(label, values))
    return chart("motivation_score", "line", window, datasets)


def activity_items(logs: Iterable, goals: Iterable = ()) -> List[Dict[str, Any]]:
    """Activity log entries, newest first."""
    titles = goal_titles(goals)
    items = []
    for log in reversed(sort_by_time(logs)):
        score = int(score_of(log))
        items.append({
            "id": str(field(log, "id")),
            "goal_id": str(field(log, "goal_id")) if field(log, "goal_id") is not None else None,
            "goal_title": resolve_goal_title(log, titles),
            "score": score,
            "score_class": "positive" if score > 0 else "negative" if score < 0 else "zero",
            "notes": field(log, "notes") or "(No notes)",
            "timestamp": field(log, "timestamp"),
        })
    return items
