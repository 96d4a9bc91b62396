"""004: create share_links table

Revision ID: 004
Revises: 003
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE share_links (
            id          UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            show_id     UUID            NOT NULL REFERENCES shows(id) ON DELETE CASCADE,
            token       VARCHAR(64)     NOT NULL,
            is_active   BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_share_links_show_id UNIQUE (show_id),
            CONSTRAINT uq_share_links_token   UNIQUE (token),
            CONSTRAINT ck_share_links_token_hex CHECK (token ~ '^[0-9a-f]{64}$')
        );
    """)
    op.execute("COMMENT ON TABLE share_links IS 'One immutable public token per show';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS share_links CASCADE;")
