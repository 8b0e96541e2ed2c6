"""claimable_prizes: one claim per verification

Revision ID: 0003_claimable_prizes
Revises: 0002_prize_definitions_prizes
Create Date: 2025-10-03

"""

from alembic import op

revision = "0003_claimable_prizes"
down_revision = "0002_prize_definitions_prizes"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS claimable_prizes (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          prize_id UUID NOT NULL REFERENCES prizes(id) ON DELETE CASCADE,
          code_id UUID NOT NULL REFERENCES codes(id) ON DELETE CASCADE,
          verified_code_id UUID NOT NULL
            REFERENCES verified_codes(id) ON DELETE CASCADE,
          cnic_image_url TEXT NULL,
          storage_key TEXT NULL,
          status TEXT NOT NULL DEFAULT 'unClaimed'
            CHECK (status IN ('unClaimed', 'claimed')),
          claimed_at TIMESTAMPTZ NULL,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_claimable_prizes_verified_code UNIQUE (verified_code_id)
        );
        CREATE INDEX IF NOT EXISTS idx_claimable_prizes_code ON claimable_prizes(code_id);
        CREATE INDEX IF NOT EXISTS idx_claimable_prizes_prize ON claimable_prizes(prize_id);
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS claimable_prizes;")
