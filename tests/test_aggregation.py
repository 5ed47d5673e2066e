import math

from fintrack.utils.aggregation import (
    bucketed_sums,
    cumulative,
    cumulative_by_entity,
    numeric,
    score_of,
    total,
    totals_by_category,
)
from fintrack.utils.classifier import Category, KindClassifier
from conftest import ts

classifier = KindClassifier.from_scheme("unified")


def test_bad_amounts_count_as_zero():
    records = [
        {"kind": "Expense", "amount": "abc"},
        {"kind": "Expense", "amount": None},
        {"kind": "Expense"},
        {"kind": "Expense", "amount": math.nan},
        {"kind": "Expense", "amount": "2.5"},
        {"kind": "Expense", "amount": 5},
    ]
    assert total(records, Category.expense, classifier) == 7.5


def test_numeric_rejects_booleans_and_infinities():
    assert numeric(True) == 0.0
    assert numeric(math.inf) == 0.0
    assert numeric("-3") == -3.0


def test_totals_by_category_covers_every_category():
    totals = totals_by_category(
        [{"kind": "Salary", "amount": 100}, {"kind": "Bonus", "amount": 20}, {"kind": "Mystery", "amount": 9}],
        classifier,
    )
    assert totals[Category.income] == 100
    assert totals[Category.bonus] == 20
    assert totals[Category.unrecognized] == 9
    assert totals[Category.savings] == 0


def test_bucketed_sums_one_cell_per_record():
    records = [
        {"kind": "Income", "amount": 100, "timestamp": ts("2024-01-02T09:00")},
        {"kind": "Expense", "amount": 30, "timestamp": ts("2024-01-01T09:00")},
        {"kind": "Expense", "amount": 20, "timestamp": ts("2024-01-02T18:00")},
        {"kind": "Mystery", "amount": 99, "timestamp": ts("2024-01-03T09:00")},
    ]
    buckets = bucketed_sums(records, "day", classifier)
    assert list(buckets) == ["2024-01-01", "2024-01-02"]
    assert buckets["2024-01-01"] == {Category.expense: 30}
    assert buckets["2024-01-02"] == {Category.income: 100, Category.expense: 20}
    # empty buckets are absent, not zero-filled
    assert "2024-01-03" not in buckets


def test_cumulative_sorts_before_folding():
    records = [
        {"amount": 5, "timestamp": ts("2024-01-03T10:00")},
        {"amount": 2, "timestamp": ts("2024-01-01T10:00")},
        {"amount": 3, "timestamp": ts("2024-01-01T12:00")},
    ]
    series = cumulative(records)
    assert list(series.items()) == [("2024-01-01", 5.0), ("2024-01-03", 10.0)]


def test_cumulative_is_non_decreasing_for_credits():
    records = [{"amount": amount, "timestamp": ts(f"2024-02-{day:02d}T08:00")}
               for day, amount in [(5, 1), (1, 0), (3, 7), (9, 2), (2, 4), (3, 0.5)]]
    values = list(cumulative(records).values())
    assert values == sorted(values)
    assert values[-1] == 14.5


def test_cumulative_ties_do_not_matter():
    same = ts("2024-01-01T10:00")
    forward = [{"amount": 1, "timestamp": same}, {"amount": 2, "timestamp": same}]
    assert cumulative(forward) == cumulative(list(reversed(forward)))


def test_cumulative_by_entity_scores_per_goal():
    logs = [
        {"goal_id": "a", "score": 3, "timestamp": ts("2024-01-01T10:00")},
        {"goal_id": "b", "score": -1, "timestamp": ts("2024-01-02T10:00")},
        {"goal_id": "a", "score": 2, "timestamp": ts("2024-01-03T10:00")},
        {"goal_id": "a", "score": "oops", "timestamp": ts("2024-01-04T10:00")},
    ]
    per_goal = cumulative_by_entity(logs, lambda log: log["goal_id"], value_fn=score_of)
    assert dict(per_goal["a"]) == {"2024-01-01": 3, "2024-01-03": 5, "2024-01-04": 5}
    assert dict(per_goal["b"]) == {"2024-01-02": -1}
