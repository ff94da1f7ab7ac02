"""Initial ledger schema: stores, owners, sessions, customers, credits, balances

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
    ]


def upgrade():
    op.create_table(
        "stores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("address", sa.String(200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("stores", schema=None) as batch_op:
        batch_op.create_index("ix_stores_phone_number", ["phone_number"], unique=True)

    op.create_table(
        "store_owners",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("store_owners", schema=None) as batch_op:
        batch_op.create_index("ix_store_owners_phone_number", ["phone_number"], unique=True)
        batch_op.create_index("ix_store_owners_store_id", ["store_id"], unique=False)

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("store_owner_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["store_owner_id"], ["store_owners.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("refresh_tokens", schema=None) as batch_op:
        batch_op.create_index("ix_refresh_tokens_store_owner_id", ["store_owner_id"], unique=False)
        batch_op.create_index("ix_refresh_tokens_owner_active", ["store_owner_id", "revoked"], unique=False)

    op.create_table(
        "tokens",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("store_owner_id", sa.Integer(), nullable=False),
        sa.Column("refresh_token_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["store_owner_id"], ["store_owners.id"]),
        sa.ForeignKeyConstraint(["refresh_token_id"], ["refresh_tokens.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("tokens", schema=None) as batch_op:
        batch_op.create_index("ix_tokens_store_owner_id", ["store_owner_id"], unique=False)
        batch_op.create_index("ix_tokens_refresh_token_id", ["refresh_token_id"], unique=False)

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("cid_number", sa.String(64), nullable=True),
        sa.Column("credit_limit", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "phone_number", name="uq_customers_store_phone"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("customers", schema=None) as batch_op:
        batch_op.create_index("ix_customers_store_id", ["store_id"], unique=False)
        batch_op.create_index("ix_customers_is_active", ["is_active"], unique=False)
        batch_op.create_index("ix_customers_store_active", ["store_id", "is_active"], unique=False)

    op.create_table(
        "credits",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("transaction_type", sa.String(32), nullable=False),
        sa.Column("items_description", sa.String(1000), nullable=True),
        sa.Column("journal_number", sa.String(100), nullable=True),
        sa.Column("transaction_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_owner_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_credits_amount_positive"),
        sa.CheckConstraint(
            "transaction_type IN ('credit_given', 'payment_received')",
            name="ck_credits_transaction_type",
        ),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.ForeignKeyConstraint(["created_by_owner_id"], ["store_owners.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("credits", schema=None) as batch_op:
        batch_op.create_index("ix_credits_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_credits_store_id", ["store_id"], unique=False)
        batch_op.create_index("ix_credits_transaction_type", ["transaction_type"], unique=False)
        batch_op.create_index("ix_credits_transaction_date", ["transaction_date"], unique=False)
        batch_op.create_index("ix_credits_created_by_owner_id", ["created_by_owner_id"], unique=False)
        batch_op.create_index("ix_credits_customer_date", ["customer_id", "transaction_date"], unique=False)
        batch_op.create_index("ix_credits_store_date", ["store_id", "transaction_date"], unique=False)

    op.create_table(
        "customer_balances",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=False),
        sa.Column("total_credit_given", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("total_payments_received", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("outstanding_balance", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("last_credit_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_transaction_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("customer_id", "store_id", name="uq_customer_balances_customer_store"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("customer_balances", schema=None) as batch_op:
        batch_op.create_index("ix_customer_balances_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_customer_balances_store_id", ["store_id"], unique=False)


def downgrade():
    op.drop_table("customer_balances")
    op.drop_table("credits")
    op.drop_table("customers")
    op.drop_table("tokens")
    op.drop_table("refresh_tokens")
    op.drop_table("store_owners")
    op.drop_table("stores")
