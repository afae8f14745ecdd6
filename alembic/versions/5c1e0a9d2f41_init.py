"""init

Revision ID: 5c1e0a9d2f41
Revises:
Create Date: 2026-10-17 10:12:31.480112

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1e0a9d2f41"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "naming_systems",
        sa.Column("guid", sa.String(512), primary_key=True),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column("status", sa.String(64), nullable=False),
        sa.Column("kind", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_naming_systems_name", "naming_systems", ["name"], unique=True)

    # One row per uniqueId of a naming system, in declaration order.
    op.create_table(
        "naming_system_unique_ids",
        sa.Column("guid", sa.String(512), primary_key=True),
        sa.Column(
            "naming_system_guid",
            sa.String(512),
            sa.ForeignKey("naming_systems.guid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("value", sa.String(1024), nullable=False),
    )
    op.create_index(
        "idx_naming_system_unique_ids_value", "naming_system_unique_ids", ["value"]
    )
    op.create_index(
        "idx_naming_system_unique_ids_naming_system",
        "naming_system_unique_ids",
        ["naming_system_guid"],
    )


def downgrade() -> None:
    op.drop_table("naming_system_unique_ids")
    op.drop_table("naming_systems")
