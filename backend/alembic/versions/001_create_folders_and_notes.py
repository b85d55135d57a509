"""Create folders and notes tables

Revision ID: 001
Revises: None
Create Date: 2025-01-15 00:00:00.000000+00:00

What:  Creates `folders` and `notes` with the share-token unique constraint
       and the listing indexes.
How:   UUID primary keys, TIMESTAMP WITH TIME ZONE columns, and a nullable
       notes.folder_id foreign key declared ON DELETE SET NULL so that
       deleting a folder leaves its notes unfiled.

Rollback: downgrade() drops both tables (all notes are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "folders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Refreshed on rename",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Rich-text HTML, stored as-is",
        ),
        sa.Column("folder_id", sa.Uuid(), nullable=True, comment="NULL means unfiled"),
        sa.Column(
            "share_token",
            sa.String(128),
            nullable=True,
            comment="Public read-only link secret; NULL when not shared",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Refreshed on title, content or folder changes only",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["folder_id"],
            ["folders.id"],
            name="fk_notes_folder_id",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("share_token", name="uq_notes_share_token"),
    )

    # Default listing order: most recently edited first
    op.create_index("idx_notes_updated_at", "notes", [sa.text("updated_at DESC")])
    op.create_index("idx_notes_folder_id", "notes", ["folder_id"])


def downgrade() -> None:
    op.drop_index("idx_notes_folder_id", table_name="notes")
    op.drop_index("idx_notes_updated_at", table_name="notes")
    op.drop_table("notes")
    op.drop_table("folders")
