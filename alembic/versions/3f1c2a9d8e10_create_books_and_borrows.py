"""create books and borrows tables

Revision ID: 3f1c2a9d8e10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

from alembic_helpers.library_ops import (
    create_books,
    create_borrows,
    drop_books,
    drop_borrows,
)

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d8e10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    create_books()
    create_borrows()


def downgrade() -> None:
    """Downgrade schema."""
    drop_borrows()
    drop_books()
