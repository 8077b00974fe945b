"""Initial schema: users, events, approvals, announcements, notices

Revision ID: 0001
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("student", "lead", "advisor", "hod", "principal")
EVENT_STATUSES = ("pending_staff_advisor", "pending_hod", "pending_principal", "approved", "rejected")
DECISIONS = ("approved", "rejected", "revision_requested")


def _in(column: str, values) -> str:
    return "{} IN ({})".format(column, ", ".join(f"'{v}'" for v in values))


def upgrade() -> None:
    """Create all tables."""

    # --- users (no FK deps) ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("department", sa.String(255), nullable=True),
        sa.Column("designation", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.CheckConstraint(_in("role", ROLES), name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # --- events (FK -> users) ---
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("venue", sa.String(255), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("budget", sa.Float(), nullable=True),
        sa.Column("expected_attendees", sa.Integer(), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("submitted_by", sa.Uuid(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending_staff_advisor"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_events"),
        sa.ForeignKeyConstraint(
            ["submitted_by"],
            ["users.id"],
            name="fk_events_submitted_by_users",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint(_in("status", EVENT_STATUSES), name="ck_events_status"),
    )
    op.create_index("ix_events_date", "events", ["date"])
    op.create_index("ix_events_submitted_by", "events", ["submitted_by"])
    op.create_index("ix_events_status", "events", ["status"])
    op.create_index("ix_events_created_at", "events", ["created_at"])

    # --- approvals (FK -> events, users) ---
    op.create_table(
        "approvals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_approvals"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["events.id"],
            name="fk_approvals_event_id_events",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["reviewed_by"],
            ["users.id"],
            name="fk_approvals_reviewed_by_users",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint(_in("status", DECISIONS), name="ck_approvals_status"),
    )
    op.create_index("ix_approvals_event_id", "approvals", ["event_id"])
    op.create_index("ix_approvals_reviewed_by", "approvals", ["reviewed_by"])
    op.create_index("ix_approvals_reviewed_at", "approvals", ["reviewed_at"])

    # --- announcements (FK -> users) ---
    op.create_table(
        "announcements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("target_audience", sa.String(20), nullable=False, server_default="all"),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_announcements"),
        sa.ForeignKeyConstraint(
            ["created_by"],
            ["users.id"],
            name="fk_announcements_created_by_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_announcements_target_audience", "announcements", ["target_audience"])
    op.create_index("ix_announcements_created_by", "announcements", ["created_by"])
    op.create_index("ix_announcements_created_at", "announcements", ["created_at"])

    # --- notices (FK -> users) ---
    op.create_table(
        "notices",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("target_audience", sa.String(20), nullable=False, server_default="all"),
        sa.Column("posted_by", sa.Uuid(), nullable=True),
        sa.Column("posted_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_notices"),
        sa.ForeignKeyConstraint(
            ["posted_by"],
            ["users.id"],
            name="fk_notices_posted_by_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_notices_category", "notices", ["category"])
    op.create_index("ix_notices_target_audience", "notices", ["target_audience"])
    op.create_index("ix_notices_posted_by", "notices", ["posted_by"])
    op.create_index("ix_notices_posted_at", "notices", ["posted_at"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("notices")
    op.drop_table("announcements")
    op.drop_table("approvals")
    op.drop_table("events")
    op.drop_table("users")
