"""codes and verified_codes tables

Revision ID: 0001_codes_verified_codes
Revises:
Create Date: 2025-10-02

"""

from alembic import op

revision = "0001_codes_verified_codes"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE EXTENSION IF NOT EXISTS pgcrypto;

        CREATE TABLE IF NOT EXISTS codes (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          code TEXT NOT NULL,
          is_valid BOOLEAN NOT NULL DEFAULT true,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
          CONSTRAINT uq_codes_code UNIQUE (code)
        );

        CREATE TABLE IF NOT EXISTS verified_codes (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          code_id UUID NOT NULL REFERENCES codes(id) ON DELETE CASCADE,
          name TEXT NOT NULL,
          phone TEXT NOT NULL,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
        CREATE INDEX IF NOT EXISTS idx_verified_codes_code ON verified_codes(code_id);
        """
    )


def downgrade() -> None:
    op.execute(
        """
        DROP TABLE IF EXISTS verified_codes;
        DROP TABLE IF EXISTS codes;
        """
    )
