"""In-memory delivery attempt log."""

from collections import Counter, deque
from typing import Deque, Dict, List, Optional

from ....core.value_objects import EventId, SubscriptionId
from ..entities.delivery_attempt import DeliveryAttempt


class InMemoryDeliveryAttemptRepository:
    """Keeps the most recent delivery attempts in memory.

    Outcome counters cover every attempt ever recorded, including ones that
    have rotated out of the bounded log.
    """

    def __init__(self, max_records: Optional[int] = 10000):
        self._attempts: Deque[DeliveryAttempt] = deque(maxlen=max_records)
        self._counters: Counter = Counter()

    async def record(self, attempt: DeliveryAttempt) -> None:
        self._attempts.append(attempt)
        self._counters["total"] += 1
        self._counters[attempt.outcome.value] += 1
        if attempt.is_terminal:
            self._counters["terminal"] += 1

    async def list(
        self,
        event_id: Optional[EventId] = None,
        subscription_id: Optional[SubscriptionId] = None,
        terminal_only: bool = False
    ) -> List[DeliveryAttempt]:
        return [
            attempt for attempt in list(self._attempts)
            if (event_id is None or attempt.event_id == event_id)
            and (subscription_id is None or attempt.subscription_id == subscription_id)
            and (not terminal_only or attempt.is_terminal)
        ]

    async def stats(self) -> Dict[str, int]:
        return dict(self._counters)

    def __len__(self) -> int:
        return len(self._attempts)
