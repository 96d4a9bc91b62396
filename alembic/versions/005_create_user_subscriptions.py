"""005: create user_subscriptions table

Revision ID: 005
Revises: 004
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE user_subscriptions (
            id                      UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id                 UUID            NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            stripe_customer_id      VARCHAR(255),
            stripe_subscription_id  VARCHAR(255),
            stripe_price_id         VARCHAR(255),
            status                  VARCHAR(30)     NOT NULL,
            current_period_start    TIMESTAMPTZ,
            current_period_end      TIMESTAMPTZ,
            cancel_at_period_end    BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_user_subscriptions_user_id      UNIQUE (user_id),
            CONSTRAINT uq_user_subscriptions_customer     UNIQUE (stripe_customer_id),
            CONSTRAINT uq_user_subscriptions_subscription UNIQUE (stripe_subscription_id),
            CONSTRAINT ck_user_subscriptions_status CHECK (status IN (
                'active', 'canceled', 'past_due', 'trialing',
                'incomplete', 'incomplete_expired', 'unpaid'
            ))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_user_subscriptions_updated_at
            BEFORE UPDATE ON user_subscriptions
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute(
        "COMMENT ON TABLE user_subscriptions IS "
        "'Cache of Stripe subscription state. Access is decided by user_entitlements';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_subscriptions CASCADE;")
