"""
Configuration management for event-stream.

Settings are read from EVENT_STREAM_* environment variables (or a .env file)
and validated with pydantic-settings. The transport set is deployment
specific: one deployment may offer generic/webhook, another pusher/webhook.
"""
import json
from typing import Annotated, List, Optional
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..features.events.services.retry_policy import RetryPolicy


def _split_csv(value):
    """Accept a list, a JSON list or a comma separated string."""
    if isinstance(value, str) and value.strip().startswith("["):
        value = json.loads(value)
    if isinstance(value, str):
        return [item.strip().lower() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip().lower() for item in value if str(item).strip()]
    return value


class DispatchSettings(BaseSettings):
    """Runtime settings for subscription storage and event dispatch."""

    model_config = SettingsConfigDict(
        env_prefix="EVENT_STREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Transports offered by this deployment
    transports: Annotated[List[str], NoDecode] = Field(default=["generic", "webhook"])
    # Transports whose subscriptions must carry a webhook config
    webhook_transports: Annotated[List[str], NoDecode] = Field(default=["webhook"])

    # Retry policy
    max_delivery_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay_seconds: float = Field(default=1.0, ge=0.0, le=3600.0)
    retry_backoff_multiplier: float = Field(default=2.0, ge=1.0, le=5.0)
    retry_max_delay_seconds: float = Field(default=300.0, ge=0.0)

    # Webhook delivery
    webhook_timeout_seconds: int = Field(default=10, ge=1, le=300)
    signature_header: str = Field(default="X-Event-Stream-Signature")
    user_agent: str = Field(default="EventStream-Webhooks/1.0")
    verify_ssl: bool = Field(default=True)

    # Concurrency
    max_concurrent_deliveries: int = Field(default=10, ge=1, le=1000)
    queue_max_size: int = Field(default=1000, ge=0)
    bus_workers: int = Field(default=1, ge=1, le=64)
    shutdown_timeout_seconds: float = Field(default=30.0, ge=0.0)
    ingress_max_requeues: int = Field(default=3, ge=0)

    # Persistence (in-memory store when unset)
    database_url: Optional[str] = Field(default=None)
    database_schema: str = Field(default="event_stream")

    @field_validator("transports", "webhook_transports", mode="before")
    @classmethod
    def parse_transport_list(cls, value):
        return _split_csv(value)

    @model_validator(mode="after")
    def check_transport_sets(self) -> "DispatchSettings":
        if not self.transports:
            raise ValueError("At least one transport must be configured")
        if "webhook_transports" not in self.model_fields_set:
            # The default only applies to transports this deployment offers
            self.webhook_transports = [name for name in self.webhook_transports if name in self.transports]
        unknown = [name for name in self.webhook_transports if name not in self.transports]
        if unknown:
            raise ValueError(f"Webhook transports {unknown} are not in the configured transport set")
        return self

    def retry_policy(self) -> RetryPolicy:
        """Build the delivery retry policy from settings."""
        return RetryPolicy(
            max_attempts=self.max_delivery_attempts,
            base_delay_seconds=self.retry_base_delay_seconds,
            backoff_multiplier=self.retry_backoff_multiplier,
            max_delay_seconds=self.retry_max_delay_seconds,
        )


@lru_cache()
def get_settings() -> DispatchSettings:
    """Get cached settings instance."""
    return DispatchSettings()
