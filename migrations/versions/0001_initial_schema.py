"""Initial schema: wallets, ledger, products, orders.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ledger_entry_kind = sa.Enum(
    "DEPOSIT", "PAYMENT", "REFUND",
    name="ledger_entry_kind_enum", create_constraint=True,
)
ledger_entry_status = sa.Enum(
    "PENDING", "COMPLETED", "FAILED", "CANCELLED",
    name="ledger_entry_status_enum", create_constraint=True,
)
order_status = sa.Enum(
    "PENDING", "PAID", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED", "REFUNDED",
    name="order_status_enum", create_constraint=True,
)
payment_method = sa.Enum(
    "WALLET", "CARD", "BANK_TRANSFER", "BLIK",
    name="payment_method_enum", create_constraint=True,
)
payment_status = sa.Enum(
    "PENDING", "PAID", "FAILED", "REFUNDED",
    name="payment_status_enum", create_constraint=True,
)


def upgrade() -> None:
    op.create_table(
        "wallet_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("balance >= 0", name="ck_wallet_balance_non_negative"),
    )
    op.create_index(
        "ix_wallet_accounts_user_id", "wallet_accounts", ["user_id"], unique=True
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("offer_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("price > 0", name="ck_product_price_positive"),
    )
    op.create_index("ix_products_category", "products", ["category"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(20), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", order_status, nullable=False),
        sa.Column("payment_method", payment_method, nullable=False),
        sa.Column("payment_status", payment_status, nullable=False),
        sa.Column("shipping_street", sa.String(255), nullable=False),
        sa.Column("shipping_city", sa.String(100), nullable=False),
        sa.Column("shipping_postal_code", sa.String(20), nullable=False),
        sa.Column("shipping_country", sa.String(100), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("ledger_entry_id", sa.Integer(), nullable=True),
        sa.Column("refund_reason", sa.String(500), nullable=True),
        sa.Column("refunded_at", sa.DateTime(), nullable=True),
        sa.Column("cancel_reason", sa.String(500), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("total_amount >= 0", name="ck_order_total_non_negative"),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_status", "orders", ["status"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("line_total", sa.Numeric(12, 2), nullable=False),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "order_sequences",
        sa.Column("day", sa.String(8), primary_key=True),
        sa.Column("last_value", sa.Integer(), nullable=False),
    )

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("external_id", sa.Uuid(), nullable=False, unique=True),
        sa.Column(
            "account_id", sa.Integer(),
            sa.ForeignKey("wallet_accounts.id"), nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("kind", ledger_entry_kind, nullable=False),
        sa.Column("status", ledger_entry_status, nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("balance_before", sa.Numeric(12, 2), nullable=False),
        sa.Column("balance_after", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("payment_method", sa.String(30), nullable=False),
        sa.Column(
            "related_order_id", sa.Integer(),
            sa.ForeignKey("orders.id"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_ledger_amount_positive"),
    )
    op.create_index("ix_wallet_transactions_account_id", "wallet_transactions", ["account_id"])
    op.create_index("ix_wallet_transactions_user_id", "wallet_transactions", ["user_id"])
    op.create_index("ix_wallet_transactions_kind", "wallet_transactions", ["kind"])
    op.create_index(
        "ix_wallet_transactions_related_order_id", "wallet_transactions", ["related_order_id"]
    )


def downgrade() -> None:
    op.drop_table("wallet_transactions")
    op.drop_table("order_sequences")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("wallet_accounts")
    for enum in (
        payment_status, payment_method, order_status,
        ledger_entry_status, ledger_entry_kind,
    ):
        enum.drop(op.get_bind(), checkfirst=True)
