from datetime import datetime, timedelta, timezone

import pytest

from fintrack.utils.bucketing import (
    Granularity,
    bucket_key,
    bucket_label,
    iter_day_keys,
    shift_day_key,
    start_of_relative_period,
    to_timestamp,
)
from conftest import ts


def test_same_calendar_day_shares_day_bucket():
    start = ts("2024-03-09T00:00:00")
    keys = {bucket_key(start + offset, "day") for offset in (0, 1, 3_600_000, 86_399_999)}
    assert keys == {"2024-03-09"}
    assert bucket_key(start + 86_400_000, "day") == "2024-03-10"


def test_day_bucket_is_utc_normalized():
    local = datetime(2024, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert bucket_key(to_timestamp(local), Granularity.day) == "2024-03-10"


@pytest.mark.parametrize("day,expected", [(1, "W1"), (7, "W1"), (8, "W2"), (14, "W2"), (15, "W3"), (29, "W5"), (31, "W5")])
def test_week_of_month_resets_each_month(day, expected):
    assert bucket_key(ts(f"2024-03-{day:02d}T12:00"), "week") == f"2024-03-{expected}"


def test_week_label_keeps_week_n_form():
    assert bucket_label("2024-03-W2", "week") == "Week 2"
    assert bucket_label("2024-03", "month") == "2024-03"


def test_month_and_year_keys():
    assert bucket_key(ts("2024-03-09T12:00"), "month") == "2024-03"
    assert bucket_key(ts("2024-03-09T12:00"), "year") == "2024"


def test_month_and_week_keys_sort_across_years():
    december = bucket_key(ts("2023-12-30T12:00"), "month")
    january = bucket_key(ts("2024-01-02T12:00"), "month")
    assert sorted([january, december]) == [december, january]
    assert bucket_key(ts("2023-12-30T12:00"), "week") < bucket_key(ts("2024-01-02T12:00"), "week")


def test_unknown_granularity_is_rejected():
    with pytest.raises(ValueError):
        bucket_key(ts("2024-03-09T12:00"), "fortnight")


NOW = datetime(2024, 3, 31, 15, 30, tzinfo=timezone.utc)


def test_day_period_aligns_to_midnight():
    assert start_of_relative_period(NOW, "day") == ts("2024-03-31T00:00")


def test_week_period_is_rolling_seven_days():
    assert start_of_relative_period(NOW, "week") == ts("2024-03-24T15:30")


def test_month_period_clamps_to_shorter_month():
    assert start_of_relative_period(NOW, "month") == ts("2024-02-29T15:30")


def test_year_period_from_leap_day():
    leap_day = datetime(2024, 2, 29, 8, 0, tzinfo=timezone.utc)
    assert start_of_relative_period(leap_day, "year") == ts("2023-02-28T08:00")
    assert start_of_relative_period(NOW, "year") == ts("2023-03-31T15:30")


def test_naive_now_is_treated_as_utc():
    assert start_of_relative_period(NOW.replace(tzinfo=None), "day") == ts("2024-03-31T00:00")


def test_iter_day_keys_crosses_month_end():
    assert list(iter_day_keys("2024-02-28", "2024-03-01")) == ["2024-02-28", "2024-02-29", "2024-03-01"]
    assert list(iter_day_keys("2024-03-02", "2024-03-01")) == []


def test_day_keys_at_calendar_edges():
    assert list(iter_day_keys("9999-12-30", "9999-12-31")) == ["9999-12-30", "9999-12-31"]
    assert shift_day_key("0001-01-03", -2) == "0001-01-01"
    assert shift_day_key("0001-01-01", -1) == "0001-01-01"
    assert shift_day_key("2024-02-28", 1) == "2024-02-29"
