"""Tests for subscription entities and transport validation."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from event_stream.core.exceptions import ValidationError
from event_stream.core.value_objects import UserId
from event_stream.features.subscriptions.entities.subscription import Subscription
from event_stream.features.subscriptions.entities.transport import (
    DEFAULT_CATALOG,
    TransportCatalog,
    TRANSPORT_GENERIC,
    TRANSPORT_PUSHER,
    TRANSPORT_WEBHOOK,
)
from event_stream.features.subscriptions.entities.webhook_config import (
    WebhookConfig,
    compute_signature,
    verify_signature,
)


class TestWebhookConfig:
    """Test webhook config validation and signing."""

    def test_valid_config(self, sample_webhook_config):
        assert sample_webhook_config.url == "https://hooks.example.com/events"
        assert sample_webhook_config.timeout_seconds == 5

    @pytest.mark.parametrize("url", ["http://x", "http://localhost:8080/hook", "https://10.0.0.1/a?b=c"])
    def test_accepts_urls(self, url):
        assert WebhookConfig(url=url).url == url

    @pytest.mark.parametrize("url", ["", "   ", "ftp://example.com", "example.com/hook", "https://"])
    def test_rejects_urls(self, url):
        with pytest.raises(ValidationError) as exc_info:
            WebhookConfig(url=url)
        assert exc_info.value.field == "transport_config.url"

    def test_strips_url(self):
        assert WebhookConfig(url="  https://example.com/hook ").url == "https://example.com/hook"

    @pytest.mark.parametrize("timeout", [0, 301, "10", True])
    def test_rejects_timeouts(self, timeout):
        with pytest.raises(ValidationError):
            WebhookConfig(url="https://example.com", timeout_seconds=timeout)

    def test_rejects_non_string_header_values(self):
        with pytest.raises(ValidationError):
            WebhookConfig(url="https://example.com", headers={"X-Count": 1})

    def test_rejects_blank_secret(self):
        with pytest.raises(ValidationError):
            WebhookConfig(url="https://example.com", secret=" ")

    def test_sign_without_secret(self):
        assert WebhookConfig(url="https://example.com").sign(b"{}") is None

    def test_sign_and_verify(self, sample_webhook_config):
        body = b'{"eventType":"group_member.added"}'
        signature = sample_webhook_config.sign(body)

        assert signature.startswith("sha256=")
        assert signature == compute_signature("s3cr3t", body)
        assert verify_signature("s3cr3t", body, signature)
        assert not verify_signature("other", body, signature)
        assert not verify_signature("s3cr3t", body + b" ", signature)
        assert not verify_signature("s3cr3t", body, "")

    def test_to_dict_hides_secret(self, sample_webhook_config):
        assert "secret" not in sample_webhook_config.to_dict(include_secret=False)
        assert sample_webhook_config.to_dict()["secret"] == "s3cr3t"

    def test_from_dict_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            WebhookConfig.from_dict({"url": "https://example.com", "method": "PUT"})


class TestTransportCatalog:
    """Test transport-keyed validation."""

    def test_default_catalog(self):
        assert DEFAULT_CATALOG.names == frozenset({TRANSPORT_GENERIC, TRANSPORT_WEBHOOK})
        assert DEFAULT_CATALOG.requires_config(TRANSPORT_WEBHOOK)
        assert not DEFAULT_CATALOG.requires_config(TRANSPORT_GENERIC)

    def test_of_drops_unknown_config_transports(self):
        catalog = TransportCatalog.of([TRANSPORT_PUSHER], config_required=[TRANSPORT_WEBHOOK])

        assert catalog.names == frozenset({TRANSPORT_PUSHER})
        assert catalog.config_required == frozenset()

    def test_config_required_must_be_in_catalog(self):
        with pytest.raises(ValueError):
            TransportCatalog(names=frozenset({"generic"}), config_required=frozenset({"webhook"}))

    def test_unknown_transport(self):
        with pytest.raises(ValidationError) as exc_info:
            DEFAULT_CATALOG.validate("pusher", None)
        assert exc_info.value.field == "transport"

    def test_webhook_requires_config(self):
        with pytest.raises(ValidationError) as exc_info:
            DEFAULT_CATALOG.validate("webhook", None)
        assert exc_info.value.field == "transport_config"

    def test_generic_rejects_config(self):
        with pytest.raises(ValidationError):
            DEFAULT_CATALOG.validate("generic", {"url": "https://example.com"})

    def test_coerces_dict_config(self):
        config = DEFAULT_CATALOG.validate("WEBHOOK", {"url": "https://example.com", "secret": "k"})

        assert isinstance(config, WebhookConfig)
        assert config.secret == "k"

    def test_pusher_deployment(self):
        catalog = TransportCatalog.of(["pusher", "webhook"])

        assert catalog.validate("pusher", None) is None
        with pytest.raises(ValidationError):
            catalog.validate("generic", None)


class TestSubscription:
    """Test subscription entity behaviour."""

    def test_create_webhook(self, sample_user_id):
        subscription = Subscription.create(
            "webhook",
            sample_user_id,
            ["group_member.added"],
            {"url": "https://example.com/hook"},
        )

        assert subscription.transport == "webhook"
        assert subscription.owner == sample_user_id
        assert subscription.transport_config.url == "https://example.com/hook"
        assert subscription.id.value.version == 7

    def test_create_coerces_owner(self):
        raw = uuid4()

        subscription = Subscription.create("generic", str(raw))

        assert subscription.owner == UserId(raw)

    def test_owner_required(self):
        with pytest.raises(ValidationError):
            Subscription.create("generic", None)

    def test_invalid_owner(self):
        with pytest.raises(ValidationError) as exc_info:
            Subscription.create("generic", "someone")
        assert exc_info.value.field == "owner"

    def test_event_types_normalized(self, sample_user_id):
        subscription = Subscription.create("generic", sample_user_id, [" a.b ", "c.d", "a.b"])

        assert subscription.event_types == ["a.b", "c.d"]

    @pytest.mark.parametrize("event_types", ["a.b", ["a.b", ""], [None]])
    def test_bad_event_types(self, sample_user_id, event_types):
        with pytest.raises(ValidationError):
            Subscription.create("generic", sample_user_id, event_types)

    def test_empty_filter_matches_everything(self, sample_user_id):
        for event_types in (None, []):
            subscription = Subscription.create("generic", sample_user_id, event_types)
            assert subscription.matches_all_events
            assert subscription.matches_event_type("anything.happened")

    def test_filter_matching(self, webhook_subscription):
        assert webhook_subscription.matches_event_type("group_member.added")
        assert not webhook_subscription.matches_event_type("group_member.removed")

    def test_immutable(self, generic_subscription):
        with pytest.raises(AttributeError):
            generic_subscription.transport = "webhook"

    def test_naive_created_at_is_utc(self, sample_user_id):
        subscription = Subscription(
            transport="generic", owner=sample_user_id, created_at=datetime(2024, 5, 1, 8, 30)
        )

        assert subscription.created_at.tzinfo == timezone.utc

    def test_dict_round_trip_keeps_identity(self, webhook_subscription):
        data = webhook_subscription.to_dict(include_secret=True)

        restored = Subscription.from_dict(data)

        assert restored == webhook_subscription

    def test_to_dict_hides_secret_by_default(self, webhook_subscription):
        assert "secret" not in webhook_subscription.to_dict()["transport_config"]
