"""
Queue Builder - Two-Pool Review Queue

Builds the ordered queue of items due "now" from a store snapshot:
1. Review pool: due Learning / Review / Lapsed items
2. New pool: due items that were never reviewed

Queue Logic:
- Both pools ordered by due_at, then item_id
- Cap each pool by its per-session limit
- Reviews first, new items appended after them
- Optional overall session size trims new items before reviews

Pure: never touches the store, safe to call concurrently and to abandon.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional

from vocab_srs.clock import ensure_utc
from vocab_srs.config import QueueConfig
from vocab_srs.session_builders.pool_types import QueuePools
from vocab_srs.session_builders.pool_utils import fill_in_order, sort_by_due, take
from vocab_srs.sm2.review_item import ReviewItem


QUEUE_ORDER = ["review", "new"]


def build_queue_pools(items: Iterable[ReviewItem], now: datetime) -> QueuePools:
    """
    Partition a snapshot into due reviews, due new items and upcoming items.

    Each pool is sorted earliest-due first.
    """
    now = ensure_utc(now)
    pools = QueuePools()
    for item in items:
        if not item.is_due(now):
            pools.upcoming.append(item)
        elif item.is_new:
            pools.new.append(item)
        else:
            pools.review.append(item)

    pools.review = sort_by_due(pools.review)
    pools.new = sort_by_due(pools.new)
    pools.upcoming = sort_by_due(pools.upcoming)
    return pools


def build_queue(
    items: Iterable[ReviewItem],
    now: datetime,
    config: Optional[QueueConfig] = None
) -> list[ReviewItem]:
    """
    Produce the ordered review queue for one owner.

    Args:
        items: All review items of the owner (any due date)
        now: Current instant
        config: Per-session caps (defaults: 10 new, 100 reviews)

    Returns:
        Due reviews (earliest first) followed by due new items; empty when
        nothing is due
    """
    config = config or QueueConfig()
    pools = build_queue_pools(items, now)

    capped = {
        "review": take(pools.review, config.max_review_per_session),
        "new": take(pools.new, config.max_new_per_session),
    }
    return fill_in_order(capped, QUEUE_ORDER, config.session_size)
