"""create actions tables

Revision ID: 3c9e1f2a7b64
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3c9e1f2a7b64"
down_revision = None
branch_labels = None
depends_on = None


BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("id", BIGINT_ID, autoincrement=True, nullable=False),
        sa.Column("business_name", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "users",
        sa.Column("id", BIGINT_ID, autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=True),
        sa.Column("last_name", sa.String(length=120), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("profile_picture_filename", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    statuses = op.create_table(
        "action_statuses",
        sa.Column("slug", sa.String(length=40), nullable=False),
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("slug"),
    )
    op.create_table(
        "action_processes",
        sa.Column("slug", sa.String(length=60), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=True),
        sa.PrimaryKeyConstraint("slug"),
    )
    op.create_table(
        "actions",
        sa.Column("id", BIGINT_ID, autoincrement=True, nullable=False),
        sa.Column("business_id", BIGINT_ID, nullable=True),
        sa.Column("process", sa.String(length=60), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status_slug", sa.String(length=40), nullable=False),
        sa.Column("assigned_user_id", BIGINT_ID, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["process"], ["action_processes.slug"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["status_slug"], ["action_statuses.slug"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["assigned_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_actions_business_id", "actions", ["business_id"], unique=False)
    op.create_index("ix_actions_status_slug", "actions", ["status_slug"], unique=False)
    op.create_index("ix_actions_assigned_user_id", "actions", ["assigned_user_id"], unique=False)
    op.create_index("ix_actions_due_at", "actions", ["due_at"], unique=False)

    op.bulk_insert(
        statuses,
        [
            {"slug": "outstanding", "name": "Outstanding", "sort_order": 1},
            {"slug": "completed", "name": "Completed", "sort_order": 2},
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_actions_due_at", table_name="actions")
    op.drop_index("ix_actions_assigned_user_id", table_name="actions")
    op.drop_index("ix_actions_status_slug", table_name="actions")
    op.drop_index("ix_actions_business_id", table_name="actions")
    op.drop_table("actions")
    op.drop_table("action_processes")
    op.drop_table("action_statuses")
    op.drop_table("users")
    op.drop_table("businesses")
