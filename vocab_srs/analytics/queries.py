"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem


ITEM_COLUMNS = [
    "item_id", "state", "due_at", "last_reviewed_at",
    "interval_days", "ease_factor", "repetitions", "lapses",
]
EVENT_COLUMNS = [
    "item_id", "grade", "answered_at", "state_before", "state_after",
    "latency_ms", "session_id", "day_utc",
]


def items_to_frame(items: Iterable[ReviewItem]) -> pd.DataFrame:
    """
    Review items as a dataframe with UTC timestamps.
    """
    rows = [
        {
            "item_id": i.item_id,
            "state": i.state.value,
            "due_at": i.due_at,
            "last_reviewed_at": i.last_reviewed_at,
            "interval_days": i.interval_days,
            "ease_factor": i.ease_factor,
            "repetitions": i.repetitions,
            "lapses": i.lapses,
        }
        for i in items
    ]
    if not rows:
        return pd.DataFrame(columns=ITEM_COLUMNS)

    df = pd.DataFrame(rows, columns=ITEM_COLUMNS)
    df["due_at"] = pd.to_datetime(df["due_at"], utc=True)
    df["last_reviewed_at"] = pd.to_datetime(df["last_reviewed_at"], utc=True)
    return df


def events_to_frame(events: Iterable[ReviewEvent]) -> pd.DataFrame:
    """
    Review events as a dataframe sorted by answer time, with a UTC day column.
    """
    rows = [
        {
            "item_id": e.item_id,
            "grade": int(e.grade),
            "answered_at": e.answered_at,
            "state_before": e.state_before.value,
            "state_after": e.state_after.value,
            "latency_ms": e.latency_ms,
            "session_id": e.session_id,
        }
        for e in events
    ]
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)
    df["answered_at"] = pd.to_datetime(df["answered_at"], utc=True)
    df["day_utc"] = df["answered_at"].dt.floor("D")
    df = df.sort_values("answered_at").reset_index(drop=True)
    return df[EVENT_COLUMNS]
