"""
Metric computations for learner dashboards.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from vocab_srs.clock import ensure_utc
from vocab_srs.sm2.constants import Grade, ReviewState


ONE_DAY = pd.Timedelta(days=1)


def _counts_by_day_offset(offsets: pd.Series, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Count integer day offsets (0 = first day of day_index) onto day_index.
    """
    counts = offsets.value_counts().reindex(range(len(day_index)), fill_value=0)
    return pd.Series(counts.to_numpy(), index=day_index, dtype="int64")


def compute_state_counts(items_df: pd.DataFrame) -> dict[str, int]:
    """
    Number of items per state, including states with no items.
    """
    counts = {state.value: 0 for state in ReviewState}
    if items_df.empty:
        return counts
    for state, count in items_df["state"].value_counts().items():
        counts[state] = int(count)
    return counts


def compute_due_forecast(
    items_df: pd.DataFrame,
    now: datetime,
    days: int = 7
) -> pd.Series:
    """
    Items becoming due on each of the next `days` UTC days.

    Overdue items are counted on the first day.
    """
    start = pd.Timestamp(ensure_utc(now)).floor("D")
    day_index = pd.date_range(start=start, periods=max(days, 0), freq="D")
    if items_df.empty or days <= 0:
        return pd.Series(0, index=day_index, dtype="int64")

    offsets = (items_df["due_at"] - start) // ONE_DAY
    offsets = offsets.clip(lower=0)
    offsets = offsets[offsets < days].astype("int64")
    return _counts_by_day_offset(offsets, day_index)


def compute_daily_reviews(events_df: pd.DataFrame) -> pd.Series:
    """
    Number of gradings per UTC day, over a dense day range.
    """
    if events_df.empty:
        return pd.Series(dtype="int64")

    first_day = events_df["day_utc"].min()
    offsets = ((events_df["day_utc"] - first_day) // ONE_DAY).astype("int64")
    day_index = pd.date_range(start=first_day, periods=int(offsets.max()) + 1, freq="D")
    return _counts_by_day_offset(offsets, day_index)


def compute_retention_rate(events_df: pd.DataFrame) -> Optional[float]:
    """
    Share of non-FAIL gradings among reviews of previously seen items.

    First exposures (state_before == New) are excluded. None without data.
    """
    if events_df.empty:
        return None
    reviews = events_df[events_df["state_before"] != ReviewState.NEW.value]
    if reviews.empty:
        return None
    return float((reviews["grade"] != int(Grade.FAIL)).mean())
