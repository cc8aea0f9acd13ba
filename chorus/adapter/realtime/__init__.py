"""Realtime broadcast adapter."""

from .hub import BroadcastHub, Subscription
from .outbox import TransactionalPublisher

__all__ = [
    "BroadcastHub",
    "Subscription",
    "TransactionalPublisher",
]
