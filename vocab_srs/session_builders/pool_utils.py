"""
Pool utilities for the queue builder.

Small, pure primitives for ordering and combining pools.
"""

from __future__ import annotations
from typing import Optional, TypeVar

from vocab_srs.sm2.review_item import ReviewItem


T = TypeVar("T")


def due_order_key(item: ReviewItem) -> tuple:
    """Earliest-due first, ties broken by item_id."""
    return (item.due_at, item.item_id)


def sort_by_due(items: list[ReviewItem]) -> list[ReviewItem]:
    return sorted(items, key=due_order_key)


def take(items: list[T], limit: Optional[int]) -> list[T]:
    """First `limit` items, or all of them when limit is None."""
    if limit is None:
        return list(items)
    return list(items[:max(0, limit)])


def fill_in_order(
    pools: dict[str, list[T]],
    order: list[str],
    target_size: Optional[int] = None
) -> list[T]:
    """
    Fill a queue by walking pools in order until target_size is reached.
    """
    queue: list[T] = []
    for name in order:
        for item in pools.get(name, []):
            if target_size is not None and len(queue) >= target_size:
                return queue
            queue.append(item)
    return queue
