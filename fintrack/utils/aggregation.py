# fintrack/utils/aggregation.py
"""
Folds over record sets.

Records may be ORM rows or plain dicts; fields are read with ``field()``.
A missing or non-numeric amount/score counts as zero so one bad record never
blanks out a whole chart.
"""
import math
from collections import OrderedDict, defaultdict
from typing import Any, Callable, Dict, Hashable, Iterable, List

from fintrack.utils.bucketing import bucket_key, day_key
from fintrack.utils.classifier import Category, KindClassifier


def field(record, name: str, default=None):
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def numeric(value) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return 0.0
        return parsed if math.isfinite(parsed) else 0.0
    return 0.0


def amount_of(record) -> float:
    return numeric(field(record, "amount"))


def score_of(record) -> float:
    return numeric(field(record, "score"))


def sort_by_time(records: Iterable) -> List:
    # stable: equal timestamps keep delivery order
    return sorted(records, key=lambda r: numeric(field(r, "timestamp")))


# ────────────────────────────────────────────────────────────────────────────────
# SCALAR TOTALS
# ────────────────────────────────────────────────────────────────────────────────
def total(records: Iterable, category: Category, classifier: KindClassifier) -> float:
    return sum(
        (amount_of(r) for r in records if classifier.classify(field(r, "kind")) == category),
        0.0,
    )


def totals_by_category(records: Iterable, classifier: KindClassifier) -> Dict[Category, float]:
    totals = {category: 0.0 for category in Category}
    for record in records:
        totals[classifier.classify(field(record, "kind"))] += amount_of(record)
    return totals


# ────────────────────────────────────────────────────────────────────────────────
# BUCKETED SUMS
# ────────────────────────────────────────────────────────────────────────────────
def bucketed_sums(records: Iterable, granularity, classifier: KindClassifier) -> Dict[str, Dict[Category, float]]:
    """
    {bucket_key: {category: sum}} with keys in chronological order.
    Buckets without records are absent; unrecognized kinds are dropped.
    """
    buckets: Dict[str, Dict[Category, float]] = defaultdict(lambda: defaultdict(float))
    for record in records:
        category = classifier.classify(field(record, "kind"))
        if category == Category.unrecognized:
            continue
        timestamp = field(record, "timestamp")
        if timestamp is None:
            continue
        buckets[bucket_key(timestamp, granularity)][category] += amount_of(record)
    return {key: dict(buckets[key]) for key in sorted(buckets)}


# ────────────────────────────────────────────────────────────────────────────────
# CUMULATIVE SUMS
# ────────────────────────────────────────────────────────────────────────────────
def cumulative(
    records: Iterable,
    key_fn: Callable[[Any], Hashable] = lambda r: day_key(field(r, "timestamp")),
    value_fn: Callable[[Any], float] = amount_of,
) -> "OrderedDict[Hashable, float]":
    """
    Running total per key, in order of first appearance after sorting by time.
    running[k] = running[k-1] + sum(values with key k).
    """
    running = 0.0
    series: "OrderedDict[Hashable, float]" = OrderedDict()
    for record in sort_by_time(records):
        running += value_fn(record)
        series[key_fn(record)] = running
    return series


def cumulative_by_entity(
    records: Iterable,
    entity_fn: Callable[[Any], Hashable],
    key_fn: Callable[[Any], Hashable] = lambda r: day_key(field(r, "timestamp")),
    value_fn: Callable[[Any], float] = amount_of,
) -> Dict[Hashable, "OrderedDict[Hashable, float]"]:
    grouped: Dict[Hashable, List] = defaultdict(list)
    for record in records:
        grouped[entity_fn(record)].append(record)
    return {entity: cumulative(rows, key_fn, value_fn) for entity, rows in grouped.items()}


def last_value_series(
    records: Iterable,
    value_fn: Callable[[Any], float],
    key_fn: Callable[[Any], Hashable] = lambda r: day_key(field(r, "timestamp")),
) -> "OrderedDict[Hashable, float]":
    """Latest absolute value per key (e.g. remaining debt snapshots)."""
    series: "OrderedDict[Hashable, float]" = OrderedDict()
    for record in sort_by_time(records):
        series[key_fn(record)] = value_fn(record)
    return series
