"""003: create shows table

Revision ID: 003
Revises: 002
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE shows (
            id          UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id     UUID            NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title       VARCHAR(200),
            show_date   DATE,
            inputs      JSONB           NOT NULL,
            results     JSONB           NOT NULL,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    # Keyset pagination: newest first per owner
    op.execute(
        "CREATE INDEX idx_shows_user_created ON shows (user_id, created_at DESC, id DESC);"
    )
    op.execute("""
        CREATE TRIGGER trg_shows_updated_at
            BEFORE UPDATE ON shows
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE shows IS 'Saved settlements: input and result snapshots';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS shows CASCADE;")
