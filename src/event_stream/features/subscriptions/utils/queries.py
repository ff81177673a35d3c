"""Subscription SQL query constants.

All queries are parameterized by schema so the same store can serve several
deployments side by side.
"""

# =====================================================================================
# SCHEMA
# =====================================================================================

SUBSCRIPTION_SCHEMA_DDL = """
    CREATE SCHEMA IF NOT EXISTS {schema};

    CREATE TABLE IF NOT EXISTS {schema}.subscriptions (
        id UUID PRIMARY KEY,
        seq BIGSERIAL NOT NULL,
        transport VARCHAR(64) NOT NULL,
        event_types TEXT[],
        owner_id UUID NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        CONSTRAINT uq_transport_owner UNIQUE (transport, owner_id)
    );

    CREATE TABLE IF NOT EXISTS {schema}.webhook_subscription_data (
        subscription_id UUID PRIMARY KEY
            REFERENCES {schema}.subscriptions(id) ON DELETE CASCADE,
        url TEXT NOT NULL,
        secret TEXT,
        timeout_seconds INTEGER,
        headers JSONB NOT NULL DEFAULT '{{}}'::jsonb
    );

    CREATE INDEX IF NOT EXISTS idx_subscriptions_event_types
        ON {schema}.subscriptions USING GIN (event_types);
"""

# =====================================================================================
# SUBSCRIPTION QUERIES
# =====================================================================================

SUBSCRIPTION_INSERT = """
    INSERT INTO {schema}.subscriptions (id, transport, event_types, owner_id, created_at)
    VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (transport, owner_id) DO NOTHING
    RETURNING id
"""

WEBHOOK_DATA_INSERT = """
    INSERT INTO {schema}.webhook_subscription_data (subscription_id, url, secret, timeout_seconds, headers)
    VALUES ($1, $2, $3, $4, $5)
"""

_SUBSCRIPTION_SELECT = """
    SELECT s.id, s.transport, s.event_types, s.owner_id, s.created_at,
           w.url, w.secret, w.timeout_seconds, w.headers
    FROM {schema}.subscriptions s
    LEFT JOIN {schema}.webhook_subscription_data w ON w.subscription_id = s.id
"""

SUBSCRIPTION_GET_BY_ID = _SUBSCRIPTION_SELECT + """
    WHERE s.id = $1
"""

SUBSCRIPTION_GET_BY_OWNER_TRANSPORT = _SUBSCRIPTION_SELECT + """
    WHERE s.owner_id = $1 AND s.transport = $2
"""

SUBSCRIPTION_LIST_MATCHING = _SUBSCRIPTION_SELECT + """
    WHERE s.event_types IS NULL
       OR cardinality(s.event_types) = 0
       OR $1 = ANY(s.event_types)
    ORDER BY s.seq ASC
"""

SUBSCRIPTION_LIST = _SUBSCRIPTION_SELECT + """
    WHERE ($1::uuid IS NULL OR s.owner_id = $1)
      AND ($2::text IS NULL OR s.transport = $2)
    ORDER BY s.seq ASC
"""

WEBHOOK_DATA_DELETE = """
    DELETE FROM {schema}.webhook_subscription_data WHERE subscription_id = $1
"""

SUBSCRIPTION_DELETE = """
    DELETE FROM {schema}.subscriptions WHERE id = $1 RETURNING id
"""
