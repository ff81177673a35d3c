"""Delivery results and delivery attempt records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ....core.value_objects import DeliveryAttemptId, EventId, SubscriptionId
from ....utils import utc_now


class DeliveryOutcome(Enum):
    """Outcome of a single delivery attempt."""

    SUCCESS = "success"
    FAILED = "failed"
    ABANDONED = "abandoned"  # Cancelled in flight, real outcome unknown

    @property
    def is_successful(self) -> bool:
        return self is DeliveryOutcome.SUCCESS


class ErrorKind:
    """Error kinds recorded on failed attempts."""

    HTTP_STATUS = "http_status"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    CALLBACK_ERROR = "callback_error"
    NO_CALLBACK = "no_callback"
    MISSING_CONFIG = "missing_config"
    UNKNOWN_TRANSPORT = "unknown_transport"
    UNEXPECTED = "unexpected_error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DeliveryResult:
    """What a transport strategy reports for one delivery call."""

    success: bool
    retryable: bool = False
    detail: Optional[str] = None
    status_code: Optional[int] = None
    error_kind: Optional[str] = None

    def __post_init__(self):
        if self.success and self.retryable:
            raise ValueError("A successful delivery cannot be retryable")

    @classmethod
    def ok(cls, status_code: Optional[int] = None, detail: Optional[str] = None) -> "DeliveryResult":
        return cls(success=True, status_code=status_code, detail=detail)

    @classmethod
    def failure(
        cls,
        retryable: bool,
        detail: str,
        error_kind: Optional[str] = None,
        status_code: Optional[int] = None
    ) -> "DeliveryResult":
        return cls(
            success=False,
            retryable=retryable,
            detail=detail,
            status_code=status_code,
            error_kind=error_kind,
        )


@dataclass(frozen=True)
class DeliveryAttempt:
    """Record of one delivery attempt of one event to one subscription.

    ``is_terminal`` marks the attempt that settled the delivery; the
    dispatcher returns exactly one terminal attempt per subscription.
    """

    subscription_id: SubscriptionId
    event_id: EventId
    event_type: str
    transport: str
    attempt_number: int
    outcome: DeliveryOutcome
    is_terminal: bool = True
    retryable: bool = False
    error_kind: Optional[str] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None
    id: DeliveryAttemptId = field(default_factory=DeliveryAttemptId.generate)
    attempted_at: datetime = field(default_factory=utc_now)

    @property
    def succeeded(self) -> bool:
        return self.outcome.is_successful

    @classmethod
    def from_result(
        cls,
        subscription_id: SubscriptionId,
        event_id: EventId,
        event_type: str,
        transport: str,
        attempt_number: int,
        result: DeliveryResult,
        is_terminal: bool
    ) -> "DeliveryAttempt":
        return cls(
            subscription_id=subscription_id,
            event_id=event_id,
            event_type=event_type,
            transport=transport,
            attempt_number=attempt_number,
            outcome=DeliveryOutcome.SUCCESS if result.success else DeliveryOutcome.FAILED,
            is_terminal=is_terminal,
            retryable=result.retryable,
            error_kind=result.error_kind,
            status_code=result.status_code,
            detail=result.detail,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "subscription_id": str(self.subscription_id),
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "transport": self.transport,
            "attempt_number": self.attempt_number,
            "outcome": self.outcome.value,
            "is_terminal": self.is_terminal,
            "retryable": self.retryable,
            "error_kind": self.error_kind,
            "status_code": self.status_code,
            "detail": self.detail,
            "attempted_at": self.attempted_at.isoformat(),
        }
