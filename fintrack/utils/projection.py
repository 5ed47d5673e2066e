# fintrack/utils/projection.py
from bisect import bisect_right
from typing import Dict, Hashable, List, Mapping, Sequence


def carry_forward(
    series: Mapping[str, float],
    all_dates: Sequence[str],
    display_dates: Sequence[str],
) -> List[float]:
    """
    Value of a cumulative series on each display date.

    Dates with no computed value take the latest earlier computed value
    (step function); dates before any history take 0. ``all_dates`` must be
    sorted and cover every key of ``series``.
    """
    known = [d for d in all_dates if d in series]
    values = []
    for date in display_dates:
        if date in series:
            values.append(series[date])
            continue
        position = bisect_right(known, date)
        values.append(series[known[position - 1]] if position else 0.0)
    return values


def project(
    cumulative_by_key: Mapping[Hashable, Mapping[str, float]],
    all_dates: Sequence[str],
    display_dates: Sequence[str],
) -> Dict[Hashable, List[float]]:
    """
    Clip cumulative series (computed over full history) to a display window
    without resetting their baseline at the window start.
    """
    all_dates = sorted(all_dates)
    return {
        key: carry_forward(series, all_dates, display_dates)
        for key, series in cumulative_by_key.items()
    }
