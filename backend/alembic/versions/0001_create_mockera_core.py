"""create mockera core

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True, unique=True),
        sa.Column("image", sa.String(length=2000), nullable=True),
        sa.Column("role", sa.Enum("student", "admin", name="userrole"), nullable=False),
        sa.Column("performance_credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_attempt_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_decay_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rank_shield_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_users_role", "users", ["role"], unique=False)
    op.create_index("ix_users_performance_credits", "users", ["performance_credits"], unique=False)

    op.create_table(
        "tests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("title", sa.String(length=300), nullable=False, server_default=""),
        sa.Column("visibility", sa.Enum("Public", "Private", name="visibility"), nullable=False),
        sa.Column("access_code", sa.String(length=64), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="180"),
        sa.Column("marking_correct", sa.Integer(), nullable=False, server_default="4"),
        sa.Column("marking_incorrect", sa.Integer(), nullable=False, server_default="-1"),
        sa.Column("lock_navigation", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_tests_owner_id", "tests", ["owner_id"], unique=False)
    op.create_index("ix_tests_visibility", "tests", ["visibility"], unique=False)

    op.create_table(
        "questions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("test_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tests.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("subject", sa.Enum("Physics", "Chemistry", "Maths", name="subject"), nullable=False),
        sa.Column("question_type", sa.Enum("MCQ", "MSQ", "NUM", name="questiontype"), nullable=False),
        sa.Column("difficulty", sa.Enum("Easy", "Moderate", "Tough", name="difficulty"), nullable=False),
        sa.Column("correct_option", sa.String(length=64), nullable=True),
        sa.Column("correct_numeric", sa.String(length=64), nullable=True),
        sa.Column("marks_correct", sa.Integer(), nullable=True),
        sa.Column("marks_incorrect", sa.Integer(), nullable=True),
        sa.Column("prompt", sa.String(), nullable=False, server_default=""),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
    )
    op.create_index("ix_questions_test_id", "questions", ["test_id"], unique=False)
    op.create_index("ix_questions_subject", "questions", ["subject"], unique=False)

    op.create_table(
        "test_percentile_bands",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("test_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tests.id"), nullable=False),
        sa.Column("min_score", sa.Integer(), nullable=False),
        sa.Column("max_score", sa.Integer(), nullable=True),
        sa.Column("percentile_label", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_test_percentile_bands_test_id", "test_percentile_bands", ["test_id"], unique=False)

    op.create_table(
        "attempts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("test_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tests.id"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.Enum("SUBMITTED", "DRAFT", name="attemptstatus"), nullable=False),
        sa.Column("candidate_name", sa.String(length=200), nullable=True),
        sa.Column("batch_code", sa.String(length=64), nullable=True),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("time_spent", sa.JSON(), nullable=False),
        sa.Column("events", sa.JSON(), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("accuracy", sa.Float(), nullable=False, server_default="0"),
        sa.Column("time_taken", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("performance_credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_multiplier", sa.Float(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_attempts_test_id", "attempts", ["test_id"], unique=False)
    op.create_index("ix_attempts_user_id", "attempts", ["user_id"], unique=False)
    op.create_index("ix_attempts_status", "attempts", ["status"], unique=False)
    op.create_index("ix_attempts_batch_code", "attempts", ["batch_code"], unique=False)
    op.create_index("ix_attempts_created_at", "attempts", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("attempts")
    op.drop_table("test_percentile_bands")
    op.drop_table("questions")
    op.drop_table("tests")
    op.drop_table("users")
    for name in ("attemptstatus", "difficulty", "questiontype", "subject", "visibility", "userrole"):
        op.execute(f"DROP TYPE IF EXISTS {name}")
