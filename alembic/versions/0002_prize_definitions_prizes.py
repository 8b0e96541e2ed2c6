"""prize_definitions and prizes (code -> prize definition link)

Revision ID: 0002_prize_definitions_prizes
Revises: 0001_codes_verified_codes
Create Date: 2025-10-02

"""

from alembic import op

revision = "0002_prize_definitions_prizes"
down_revision = "0001_codes_verified_codes"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS prize_definitions (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          prize_name TEXT NOT NULL,
          description TEXT NOT NULL DEFAULT '',
          requires_cnic BOOLEAN NOT NULL DEFAULT false,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );

        CREATE TABLE IF NOT EXISTS prizes (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          code_id UUID NOT NULL REFERENCES codes(id) ON DELETE CASCADE,
          prize_definition_id UUID NOT NULL
            REFERENCES prize_definitions(id) ON DELETE RESTRICT,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_prizes_code UNIQUE (code_id)
        );
        CREATE INDEX IF NOT EXISTS idx_prizes_definition ON prizes(prize_definition_id);
        """
    )


def downgrade() -> None:
    op.execute(
        """
        DROP TABLE IF EXISTS prizes;
        DROP TABLE IF EXISTS prize_definitions;
        """
    )
