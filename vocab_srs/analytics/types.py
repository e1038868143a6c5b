"""
Types for learner dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd


@dataclass(frozen=True)
class OwnerDashboard:
    """
    Precomputed metrics and series for one learner.
    """
    owner_id: str
    total_items: int
    state_counts: dict[str, int]
    due_now: int
    due_forecast: pd.Series
    daily_reviews: pd.Series
    retention_rate: Optional[float]
