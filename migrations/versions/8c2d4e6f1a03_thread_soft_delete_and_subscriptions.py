"""thread soft delete, category ordering and subscriptions

Revision ID: 8c2d4e6f1a03
Revises: 5b1f0c2e9a41
Create Date: 2026-10-17 15:40:02.901377

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8c2d4e6f1a03"
down_revision: Union[str, Sequence[str], None] = "5b1f0c2e9a41"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("thread") as batch_op:
        batch_op.add_column(
            sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false())
        )
    with op.batch_alter_table("category") as batch_op:
        batch_op.add_column(
            sa.Column("display_order", sa.Integer(), nullable=False, server_default="0")
        )
        batch_op.add_column(
            sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default=sa.false())
        )

    op.create_table(
        "thread_subscription",
        sa.Column("thread_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["thread_id"], ["thread.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("thread_id", "user_id"),
    )
    op.create_table(
        "category_subscription",
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("category_id", "user_id"),
    )


def downgrade() -> None:
    op.drop_table("category_subscription")
    op.drop_table("thread_subscription")
    with op.batch_alter_table("category") as batch_op:
        batch_op.drop_column("is_hidden")
        batch_op.drop_column("display_order")
    with op.batch_alter_table("thread") as batch_op:
        batch_op.drop_column("is_deleted")
