"""Initial migration: create products and services tables

Revision ID: 001_content_tables
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_content_tables"
down_revision = None
branch_labels = None
depends_on = None

CONTENT_TABLES = ("products", "services")


def upgrade() -> None:
    # Products and services share one shape in separate tables
    for table_name in CONTENT_TABLES:
        op.create_table(
            table_name,
            sa.Column("id", sa.String(length=32), nullable=False),
            sa.Column("title", sa.String(), nullable=False),
            sa.Column("description", sa.String(), nullable=False),
            sa.Column("image_url", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table_name}_created_at", table_name, ["created_at"])


def downgrade() -> None:
    for table_name in reversed(CONTENT_TABLES):
        op.drop_index(f"ix_{table_name}_created_at", table_name=table_name)
        op.drop_table(table_name)
