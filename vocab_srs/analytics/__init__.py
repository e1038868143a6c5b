"""Analytics package exports."""

from vocab_srs.analytics.service import build_owner_dashboard
from vocab_srs.analytics.types import OwnerDashboard

__all__ = [
    "build_owner_dashboard",
    "OwnerDashboard",
]
