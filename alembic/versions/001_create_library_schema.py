"""create library schema

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS libraryservice")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS libraryservice.mylibrary (
            id          SERIAL PRIMARY KEY,
            user_id     INTEGER NOT NULL,
            book_id     INTEGER NOT NULL,
            status      CHARACTER VARYING NOT NULL,
            CONSTRAINT check_mylibrary_status
                CHECK (status IN ('Want to read', 'Currently reading', 'Read')),
            CONSTRAINT uq_mylibrary_user_book UNIQUE (user_id, book_id)
        )
    """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS libraryservice.mylibrary")
