"""Initial schema for users, questions and the activity log

Revision ID: 202501100001
Revises:
Create Date: 2025-01-10 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202501100001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("asker", "responder", "admin", name="user_role")
user_status_enum = sa.Enum("active", "inactive", "suspended", name="user_status")
question_status_enum = sa.Enum(
    "pending",
    "assigned",
    "in_progress",
    "answered",
    "closed",
    name="question_status",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=128), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="asker"),
        sa.Column("status", user_status_enum, nullable=False, server_default="active"),
        sa.Column("expertise", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "asker_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "responder_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("status", question_status_enum, nullable=False, server_default="pending"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("answer_content", sa.Text(), nullable=True),
        sa.Column("answer_created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_questions_asker_id", "questions", ["asker_id"])
    op.create_index("ix_questions_responder_id", "questions", ["responder_id"])
    op.create_index("ix_questions_status", "questions", ["status"])
    op.create_index("ix_questions_status_responder", "questions", ["status", "responder_id"])
    op.create_index("ix_questions_public_created", "questions", ["is_public", "created_at"])

    op.create_table(
        "activities",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column(
            "question_id",
            sa.String(length=36),
            sa.ForeignKey("questions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("asker", sa.String(length=255), nullable=False),
        sa.Column("responder_id", sa.String(length=36), nullable=True),
        sa.Column("responder", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_activities_question_id", "activities", ["question_id"])
    op.create_index("ix_activities_timestamp", "activities", ["timestamp"])


def downgrade() -> None:
    op.drop_index("ix_activities_timestamp", table_name="activities")
    op.drop_index("ix_activities_question_id", table_name="activities")
    op.drop_table("activities")

    op.drop_index("ix_questions_public_created", table_name="questions")
    op.drop_index("ix_questions_status_responder", table_name="questions")
    op.drop_index("ix_questions_status", table_name="questions")
    op.drop_index("ix_questions_responder_id", table_name="questions")
    op.drop_index("ix_questions_asker_id", table_name="questions")
    op.drop_table("questions")

    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    question_status_enum.drop(bind, checkfirst=True)
    user_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
