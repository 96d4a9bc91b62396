"""006: create user_entitlements table

Revision ID: 006
Revises: 005
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE user_entitlements (
            id          UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id     UUID            NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            source      VARCHAR(20)     NOT NULL,
            status      VARCHAR(20)     NOT NULL,
            granted_by  UUID,
            granted_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            expires_at  TIMESTAMPTZ,
            metadata    JSONB           NOT NULL DEFAULT '{}'::jsonb,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_user_entitlements_user_id UNIQUE (user_id),
            CONSTRAINT ck_user_entitlements_source CHECK (source IN (
                'stripe', 'manual_comp', 'dev_account', 'test_account'
            )),
            CONSTRAINT ck_user_entitlements_status CHECK (status IN (
                'active', 'inactive', 'expired'
            ))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_user_entitlements_updated_at
            BEFORE UPDATE ON user_entitlements
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE user_entitlements IS 'Single source of truth for paid access';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_entitlements CASCADE;")
