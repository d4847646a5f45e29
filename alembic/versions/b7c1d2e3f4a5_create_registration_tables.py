"""create registration tables

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-09-28 10:00:00.000000

This migration creates the tables behind the parent registration flow:
1. schools - tenant directory with capacity and offered programs
2. leads - prospective enrollments
3. waitlist - one entry per lead, positioned per (school, program)
4. transactions - pending payment intents
5. student_documents - uploaded file references
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c1d2e3f4a5"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create registration tables and enum types."""
    school_status_enum = postgresql.ENUM(
        "active",
        "inactive",
        name="school_status",
        create_type=False,
    )
    school_status_enum.create(op.get_bind(), checkfirst=True)

    payment_status_enum = postgresql.ENUM(
        "pending",
        "processing",
        "succeeded",
        "paid",
        "failed",
        "refunded",
        name="payment_status",
        create_type=False,
    )
    payment_status_enum.create(op.get_bind(), checkfirst=True)

    document_category_enum = postgresql.ENUM(
        "required",
        "optional",
        name="document_category",
        create_type=False,
    )
    document_category_enum.create(op.get_bind(), checkfirst=True)

    document_status_enum = postgresql.ENUM(
        "pending",
        "approved",
        "rejected",
        name="document_status",
        create_type=False,
    )
    document_status_enum.create(op.get_bind(), checkfirst=True)

    # Schools
    op.create_table(
        "schools",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column(
            "programs_offered",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column(
            "status",
            school_status_enum,
            nullable=False,
            server_default="active",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)

    # Leads
    op.create_table(
        "leads",
        *_base_columns(),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("program", sa.String(length=100), nullable=True),
        sa.Column("lead_status", sa.String(length=50), nullable=False, server_default="new"),
        sa.Column("parent_name", sa.String(length=200), nullable=True),
        sa.Column("parent_email", sa.String(length=255), nullable=True),
        sa.Column("child_name", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_leads_school_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_leads_school_program", "leads", ["school_id", "program"], unique=False)
    op.create_index("ix_leads_parent_email", "leads", ["parent_email"], unique=False)

    # Waitlist
    op.create_table(
        "waitlist",
        *_base_columns(),
        sa.Column("lead_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("program", sa.String(length=100), nullable=False),
        sa.Column("waitlist_position", sa.Integer(), nullable=False),
        sa.Column("priority_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="waitlisted"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("offer_date", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lead_id"],
            ["leads.id"],
            name="fk_waitlist_lead_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_waitlist_school_id",
            ondelete="CASCADE",
        ),
        # One waitlist entry per lead; backs idempotent submission
        sa.UniqueConstraint("lead_id", name="uq_waitlist_lead_id"),
    )
    op.create_index(
        "ix_waitlist_school_program", "waitlist", ["school_id", "program"], unique=False
    )
    op.create_index("ix_waitlist_status", "waitlist", ["status"], unique=False)

    # Transactions
    op.create_table(
        "transactions",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="usd"),
        sa.Column(
            "status",
            payment_status_enum,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("payment_type", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_transactions_school_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_transactions_school_id", "transactions", ["school_id"], unique=False)

    # Student documents
    op.create_table(
        "student_documents",
        *_base_columns(),
        sa.Column("student_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("document_type", sa.String(length=100), nullable=False),
        sa.Column(
            "category",
            document_category_enum,
            nullable=False,
            server_default="optional",
        ),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_path", sa.String(length=500), nullable=False),
        sa.Column("file_url", sa.String(length=1000), nullable=False),
        sa.Column("storage_provider", sa.String(length=20), nullable=False, server_default="s3"),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=False),
        sa.Column("uploaded_by", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column(
            "upload_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "status",
            document_status_enum,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_student_documents_school_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_student_documents_student_id", "student_documents", ["student_id"], unique=False
    )
    op.create_index(
        "ix_student_documents_school_id", "student_documents", ["school_id"], unique=False
    )


def downgrade() -> None:
    """Drop registration tables and enum types."""
    op.drop_index("ix_student_documents_school_id", table_name="student_documents")
    op.drop_index("ix_student_documents_student_id", table_name="student_documents")
    op.drop_table("student_documents")

    op.drop_index("ix_transactions_school_id", table_name="transactions")
    op.drop_table("transactions")

    op.drop_index("ix_waitlist_status", table_name="waitlist")
    op.drop_index("ix_waitlist_school_program", table_name="waitlist")
    op.drop_table("waitlist")

    op.drop_index("ix_leads_parent_email", table_name="leads")
    op.drop_index("ix_leads_school_program", table_name="leads")
    op.drop_table("leads")

    op.drop_index(op.f("ix_schools_name"), table_name="schools")
    op.drop_table("schools")

    op.execute("DROP TYPE IF EXISTS document_status")
    op.execute("DROP TYPE IF EXISTS document_category")
    op.execute("DROP TYPE IF EXISTS payment_status")
    op.execute("DROP TYPE IF EXISTS school_status")
