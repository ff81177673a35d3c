"""Subscription store implementations."""

from .memory_subscription_repository import InMemorySubscriptionRepository
from .subscription_repository import PostgresSubscriptionRepository

__all__ = [
    "InMemorySubscriptionRepository",
    "PostgresSubscriptionRepository",
]
