"""add waitlist sequences

Revision ID: c8d2e3f4a5b6
Revises: b7c1d2e3f4a5
Create Date: 2026-10-02 09:30:00.000000

Positions used to be assigned by counting existing entries and adding one,
so concurrent submissions for the same program could receive the same
position. This migration adds a per-(school, program) counter row that is
incremented with a single upsert.

Existing waitlists are seeded with their current highest position so new
entries always land after them.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "c8d2e3f4a5b6"
down_revision: str | Sequence[str] | None = "b7c1d2e3f4a5"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create waitlist_sequences and seed it from existing entries."""
    op.create_table(
        "waitlist_sequences",
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("program", sa.String(length=100), nullable=False),
        sa.Column("last_position", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("school_id", "program"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_waitlist_sequences_school_id",
            ondelete="CASCADE",
        ),
    )

    op.execute(
        """
        INSERT INTO waitlist_sequences (school_id, program, last_position)
        SELECT school_id, program, MAX(waitlist_position)
        FROM waitlist
        GROUP BY school_id, program
        """
    )


def downgrade() -> None:
    """Drop waitlist_sequences. Positions fall back to whatever the table holds."""
    op.drop_table("waitlist_sequences")
