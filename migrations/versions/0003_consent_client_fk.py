"""Drop consent_given and cascade consents from their client

Revision ID: 0003
Revises: 0002
Create Date: 2026-02-11 16:28:07

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # A row is now the grant itself; declined rows never meant consent.
    op.execute("DELETE FROM oauth_consents WHERE consent_given = false")
    op.execute(
        "DELETE FROM oauth_consents "
        "WHERE client_id NOT IN (SELECT client_id FROM oauth_clients)"
    )
    with op.batch_alter_table("oauth_consents") as batch_op:
        batch_op.drop_column("consent_given")
        batch_op.create_foreign_key(
            "fk_oauth_consents_client_id",
            "oauth_clients",
            ["client_id"],
            ["client_id"],
            ondelete="CASCADE",
        )


def downgrade() -> None:
    with op.batch_alter_table("oauth_consents") as batch_op:
        batch_op.drop_constraint("fk_oauth_consents_client_id", type_="foreignkey")
        batch_op.add_column(
            sa.Column("consent_given", sa.Boolean, nullable=False, server_default=sa.true())
        )
