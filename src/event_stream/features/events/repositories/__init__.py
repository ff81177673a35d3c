"""Delivery attempt log implementations."""

from .memory_attempt_repository import InMemoryDeliveryAttemptRepository

__all__ = ["InMemoryDeliveryAttemptRepository"]
