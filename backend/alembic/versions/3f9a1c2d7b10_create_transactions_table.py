"""create transactions table

Revision ID: 3f9a1c2d7b10
Revises:
Create Date: 2026-10-19 10:04:12.118207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("converted_amount", sa.Float(), nullable=False),
        sa.CheckConstraint("description <> ''", name="ck_transactions_description_not_empty"),
    )
    op.create_index("ix_transactions_amount", "transactions", ["amount"])
    op.create_index(
        "ix_transactions_date_id", "transactions", [sa.text("date DESC"), "id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_transactions_date_id", table_name="transactions")
    op.drop_index("ix_transactions_amount", table_name="transactions")
    op.drop_table("transactions")
