"""Tag redirect URI storage with a schema version

Revision ID: 0002
Revises: 0001
Create Date: 2025-12-03 14:30:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Existing rows hold the comma-delimited encoding; they are rewritten lazily on next save.
    op.add_column("oauth_clients", sa.Column("redirect_uris_version", sa.Integer, nullable=True))
    op.execute("UPDATE oauth_clients SET redirect_uris_version = 1")


def downgrade() -> None:
    with op.batch_alter_table("oauth_clients") as batch_op:
        batch_op.drop_column("redirect_uris_version")
