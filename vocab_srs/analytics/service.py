"""
Service layer to assemble a learner dashboard from a store.
"""

from __future__ import annotations

from datetime import datetime

from vocab_srs.analytics.metrics import (
    compute_daily_reviews,
    compute_due_forecast,
    compute_retention_rate,
    compute_state_counts,
)
from vocab_srs.analytics.queries import events_to_frame, items_to_frame
from vocab_srs.analytics.types import OwnerDashboard
from vocab_srs.session_builders.queue_builder import build_queue_pools
from vocab_srs.stores.base import ReviewItemStore


def build_owner_dashboard(
    store: ReviewItemStore,
    owner_id: str,
    now: datetime,
    forecast_days: int = 7
) -> OwnerDashboard:
    """
    Build all KPI values and series for one learner.
    """
    items = store.list_items(owner_id)
    items_df = items_to_frame(items)
    events_df = events_to_frame(store.list_events(owner_id))

    return OwnerDashboard(
        owner_id=owner_id,
        total_items=len(items),
        state_counts=compute_state_counts(items_df),
        due_now=build_queue_pools(items, now).due_count,
        due_forecast=compute_due_forecast(items_df, now, forecast_days),
        daily_reviews=compute_daily_reviews(events_df),
        retention_rate=compute_retention_rate(events_df),
    )
