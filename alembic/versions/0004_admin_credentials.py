"""admin_credentials (bcrypt hash of the single back-office login)

Revision ID: 0004_admin_credentials
Revises: 0003_claimable_prizes
Create Date: 2025-10-03

"""

from alembic import op

revision = "0004_admin_credentials"
down_revision = "0003_claimable_prizes"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS admin_credentials (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          username TEXT NOT NULL UNIQUE,
          password_hash TEXT NOT NULL,
          updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS admin_credentials;")
