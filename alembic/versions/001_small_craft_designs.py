"""add small_craft_designs table

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "small_craft_designs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_small_craft_designs_id"), "small_craft_designs", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_small_craft_designs_name"), "small_craft_designs", ["name"], unique=True
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_small_craft_designs_name"), table_name="small_craft_designs")
    op.drop_index(op.f("ix_small_craft_designs_id"), table_name="small_craft_designs")
    op.drop_table("small_craft_designs")
