"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the campus events scheduler:
colleges, users, forums, forum_heads, venues, events,
event_staff_assignments.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("college_admin", "forum_head", "teacher", "student", name="userrole")
approval_status = sa.Enum("pending", "approved", "rejected", name="approvalstatus")
event_status = sa.Enum("draft", "pending_approval", "confirmed", "cancelled", name="eventstatus")
assignment_status = sa.Enum("pending", "approved", "rejected", name="assignmentstatus")


def upgrade() -> None:
    # --- colleges ---
    op.create_table(
        "colleges",
        sa.Column("college_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("domain_name", sa.String(255), nullable=True, unique=True),
        sa.Column("has_paid", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False, server_default=""),
        sa.Column("role", user_role, nullable=False),
        sa.Column("approval_status", approval_status, nullable=False, server_default="pending"),
        sa.Column("is_email_verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("email_verification_expires", sa.DateTime, nullable=True),
        sa.Column("college_id", sa.String(36), sa.ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("college_id", "email", name="uq_users_college_email"),
    )

    # --- forums ---
    op.create_table(
        "forums",
        sa.Column("forum_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("college_id", sa.String(36), sa.ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    # --- forum_heads ---
    op.create_table(
        "forum_heads",
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
        sa.Column("forum_id", sa.String(36), sa.ForeignKey("forums.forum_id", ondelete="CASCADE"), primary_key=True),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.false()),
    )

    # --- venues ---
    op.create_table(
        "venues",
        sa.Column("venue_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("location_details", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("college_id", sa.String(36), sa.ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_time", sa.DateTime, nullable=False),
        sa.Column("end_time", sa.DateTime, nullable=False),
        sa.Column("status", event_status, nullable=False, server_default="draft"),
        sa.Column("banner_image", sa.String(500), nullable=True),
        sa.Column("registration_link", sa.String(500), nullable=True),
        sa.Column("resize_mode", sa.String(20), nullable=False, server_default="cover"),
        sa.Column("college_id", sa.String(36), sa.ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False),
        sa.Column("forum_id", sa.String(36), sa.ForeignKey("forums.forum_id", ondelete="CASCADE"), nullable=False),
        sa.Column("venue_id", sa.String(36), sa.ForeignKey("venues.venue_id", ondelete="SET NULL"), nullable=True),
        sa.Column("organizer_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("start_time < end_time", name="ck_events_interval"),
    )
    op.create_index("ix_events_start_time", "events", ["start_time"])
    op.create_index("ix_events_venue_id", "events", ["venue_id"])

    # --- event_staff_assignments ---
    op.create_table(
        "event_staff_assignments",
        sa.Column("assignment_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("assignment_role", sa.String(150), nullable=False, server_default="Staff in Charge"),
        sa.Column("status", assignment_status, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "user_id", name="uq_staff_event_user"),
    )
    op.create_index("ix_event_staff_assignments_user_id", "event_staff_assignments", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_event_staff_assignments_user_id", table_name="event_staff_assignments")
    op.drop_table("event_staff_assignments")
    op.drop_index("ix_events_venue_id", table_name="events")
    op.drop_index("ix_events_start_time", table_name="events")
    op.drop_table("events")
    op.drop_table("venues")
    op.drop_table("forum_heads")
    op.drop_table("forums")
    op.drop_table("users")
    op.drop_table("colleges")
    for enum_type in (assignment_status, event_status, approval_status, user_role):
        enum_type.drop(op.get_bind(), checkfirst=True)
