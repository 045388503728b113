"""create_auth_sessions_table

Revision ID: 3c1e7a9d52f4
Revises: 
Create Date: 2026-10-18 09:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1e7a9d52f4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("storage_key", sa.String(), nullable=False),
        sa.Column("token", sa.String(), nullable=True),
        sa.Column("user_json", sa.String(), nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_sessions_storage_key", "auth_sessions", ["storage_key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_auth_sessions_storage_key", table_name="auth_sessions")
    op.drop_table("auth_sessions")
