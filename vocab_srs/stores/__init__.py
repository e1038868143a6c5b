"""Review item stores."""

from vocab_srs.stores.base import ReviewItemStore
from vocab_srs.stores.memory_store import MemoryReviewStore

__all__ = [
    "ReviewItemStore",
    "MemoryReviewStore",
]
