import sqlalchemy as sa
from alembic import op


def create_books() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("author", sa.String(length=100), nullable=False),
        sa.Column("genre", sa.String(length=20), nullable=False),
        sa.Column("isbn", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("copies", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("isbn", name="uq_books_isbn"),
    )
    op.create_index(op.f("ix_books_genre"), "books", ["genre"], unique=False)


def drop_books() -> None:
    op.drop_index(op.f("ix_books_genre"), table_name="books")
    op.drop_table("books")


def create_borrows() -> None:
    # book_id is intentionally not a foreign key: deleting a book keeps its borrows.
    op.create_table(
        "borrows",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("book_id", sa.String(length=36), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_borrows_book_id"), "borrows", ["book_id"], unique=False)


def drop_borrows() -> None:
    op.drop_index(op.f("ix_borrows_book_id"), table_name="borrows")
    op.drop_table("borrows")
