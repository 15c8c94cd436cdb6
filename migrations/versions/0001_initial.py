"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2025-10-22 09:00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.String, primary_key=True),
        sa.Column("username", sa.String, nullable=False, unique=True),
        sa.Column("email", sa.String, nullable=True, unique=True),
        sa.Column("permissions_bitmask", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_table(
        "sessions",
        sa.Column("session_id", sa.String, primary_key=True),
        sa.Column("token_hash", sa.String, nullable=False, unique=True),
        sa.Column(
            "user_id",
            sa.String,
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_sessions_token_hash", "sessions", ["token_hash"])

    op.create_table(
        "oauth_clients",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("client_id", sa.String, nullable=False, unique=True),
        sa.Column("client_secret_hash", sa.String, nullable=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("icon", sa.String, nullable=True),
        sa.Column("uri", sa.String, nullable=True),
        sa.Column("tos", sa.String, nullable=True),
        sa.Column("policy", sa.String, nullable=True),
        sa.Column("contacts", sa.JSON, nullable=False),
        sa.Column("metadata", sa.Text, nullable=True),
        sa.Column("type", sa.String, nullable=False, server_default="web"),
        sa.Column("disabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("public", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "token_endpoint_auth_method",
            sa.String,
            nullable=False,
            server_default="client_secret_basic",
        ),
        sa.Column("jwks_uri", sa.String, nullable=True),
        sa.Column("scopes", sa.JSON, nullable=False),
        sa.Column("grant_types", sa.JSON, nullable=False),
        sa.Column("response_types", sa.JSON, nullable=False),
        # Comma-delimited list in this schema revision.
        sa.Column("redirect_uris", sa.Text, nullable=False),
        sa.Column(
            "user_id",
            sa.String,
            sa.ForeignKey("users.user_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_oauth_clients_client_id", "oauth_clients", ["client_id"])

    for table in ("oauth_access_tokens", "oauth_refresh_tokens"):
        op.create_table(
            table,
            sa.Column("id", sa.String, primary_key=True),
            sa.Column("token", sa.String, nullable=False, unique=table == "oauth_access_tokens"),
            sa.Column(
                "client_id",
                sa.String,
                sa.ForeignKey("oauth_clients.client_id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column(
                "user_id",
                sa.String,
                sa.ForeignKey("users.user_id", ondelete="CASCADE"),
                nullable=table == "oauth_access_tokens",
            ),
            sa.Column("reference_id", sa.String, nullable=True),
            sa.Column("scopes", sa.JSON, nullable=False),
            sa.Column("expires_at", sa.DateTime, nullable=False),
            *([sa.Column("revoked", sa.DateTime, nullable=True)] if table == "oauth_refresh_tokens" else []),
            sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        )

    # Consent rows originally carried a flag and no client FK.
    op.create_table(
        "oauth_consents",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("client_id", sa.String, nullable=False),
        sa.Column(
            "user_id",
            sa.String,
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("reference_id", sa.String, nullable=True),
        sa.Column("scopes", sa.JSON, nullable=False),
        sa.Column("consent_given", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("idx_oauth_consent_client_user", "oauth_consents", ["client_id", "user_id"])

    op.create_table(
        "scope_descriptions",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("locale", sa.String, nullable=False),
        sa.Column("display_name", sa.String, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("name", "locale", name="constraint_scope_name_locale"),
    )


def downgrade() -> None:
    op.drop_table("scope_descriptions")
    op.drop_index("idx_oauth_consent_client_user", table_name="oauth_consents")
    op.drop_table("oauth_consents")
    op.drop_table("oauth_refresh_tokens")
    op.drop_table("oauth_access_tokens")
    op.drop_index("ix_oauth_clients_client_id", table_name="oauth_clients")
    op.drop_table("oauth_clients")
    op.drop_index("ix_sessions_token_hash", table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("users")
