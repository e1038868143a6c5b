"""Queue building for review sessions."""

from vocab_srs.session_builders.pool_types import QueuePools
from vocab_srs.session_builders.queue_builder import build_queue, build_queue_pools

__all__ = [
    "QueuePools",
    "build_queue",
    "build_queue_pools",
]
