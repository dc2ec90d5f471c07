"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

table_status = postgresql.ENUM("AVAILABLE", "OCCUPIED", "RESERVED", "INACTIVE", name="table_status", create_type=False)
user_role = postgresql.ENUM("ADMIN", "WAITER", "STAFF", name="user_role", create_type=False)
category_status = postgresql.ENUM("ACTIVE", "INACTIVE", name="category_status", create_type=False)
menu_item_status = postgresql.ENUM("AVAILABLE", "UNAVAILABLE", "SOLD_OUT", name="menu_item_status", create_type=False)
modifier_status = postgresql.ENUM("ACTIVE", "INACTIVE", name="modifier_status", create_type=False)
selection_type = postgresql.ENUM("SINGLE", "MULTIPLE", name="selection_type", create_type=False)
order_status = postgresql.ENUM(
    "PENDING", "PREPARING", "READY", "SERVED", "COMPLETED", "CANCELLED", name="order_status", create_type=False)
order_payment_status = postgresql.ENUM("PENDING", "PAID", name="order_payment_status", create_type=False)
order_item_status = postgresql.ENUM("PENDING", "READY", name="order_item_status", create_type=False)
payment_method = postgresql.ENUM("CASH", "CARD", "VNPAY", "E_WALLET", name="payment_method", create_type=False)
payment_status = postgresql.ENUM("PENDING", "PAID", "FAILED", name="payment_status", create_type=False)

ENUM_TYPES = (
    table_status, user_role, category_status, menu_item_status, modifier_status, selection_type,
    order_status, order_payment_status, order_item_status, payment_method, payment_status,
)


def _audit_columns():
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    # Shared types are created once up front, the tables only reference them
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "tables",
        *_audit_columns(),
        sa.Column("table_number", sa.String(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("status", table_status, nullable=False),
        sa.Column("qr_token", sa.String(), nullable=True),
        sa.Column("current_session_id", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tables_id", "tables", ["id"])
    op.create_index("ix_tables_table_number", "tables", ["table_number"], unique=True)

    op.create_table(
        "users",
        *_audit_columns(),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "categories",
        *_audit_columns(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", category_status, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_categories_id", "categories", ["id"])

    op.create_table(
        "menu_items",
        *_audit_columns(),
        sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", menu_item_status, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_menu_items_id", "menu_items", ["id"])
    op.create_index("ix_menu_items_name", "menu_items", ["name"])

    op.create_table(
        "modifier_groups",
        *_audit_columns(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("selection_type", selection_type, nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("min_selections", sa.Integer(), nullable=False),
        sa.Column("max_selections", sa.Integer(), nullable=False),
        sa.Column("status", modifier_status, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_modifier_groups_id", "modifier_groups", ["id"])

    op.create_table(
        "modifier_options",
        *_audit_columns(),
        sa.Column("group_id", sa.Uuid(), sa.ForeignKey("modifier_groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("price_adjustment", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", modifier_status, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_modifier_options_id", "modifier_options", ["id"])

    op.create_table(
        "menu_item_modifier_groups",
        sa.Column("menu_item_id", sa.Uuid(), sa.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "modifier_group_id", sa.Uuid(), sa.ForeignKey("modifier_groups.id", ondelete="CASCADE"), nullable=False
        ),
        sa.PrimaryKeyConstraint("menu_item_id", "modifier_group_id"),
    )

    op.create_table(
        "orders",
        *_audit_columns(),
        sa.Column("order_number", sa.String(), nullable=False),
        sa.Column("table_id", sa.Uuid(), sa.ForeignKey("tables.id"), nullable=False),
        sa.Column("status", order_status, nullable=False),
        sa.Column("payment_status", order_payment_status, nullable=False),
        sa.Column("subtotal_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_table_id", "orders", ["table_id"])
    op.create_index("ix_orders_status", "orders", ["status"])

    op.create_table(
        "order_items",
        *_audit_columns(),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", sa.Uuid(), sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("menu_item_name", sa.String(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("modifiers_total", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("special_request", sa.String(255), nullable=True),
        sa.Column("status", order_item_status, nullable=False),
        sa.Column("prepared_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_order_items_id", "order_items", ["id"])
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "order_item_modifiers",
        *_audit_columns(),
        sa.Column(
            "order_item_id", sa.Uuid(), sa.ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("modifier_option_id", sa.Uuid(), sa.ForeignKey("modifier_options.id"), nullable=False),
        sa.Column("modifier_group_name", sa.String(), nullable=False),
        sa.Column("modifier_option_name", sa.String(), nullable=False),
        sa.Column("price_adjustment", sa.Numeric(10, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_order_item_modifiers_id", "order_item_modifiers", ["id"])
    op.create_index("ix_order_item_modifiers_order_item_id", "order_item_modifiers", ["order_item_id"])

    op.create_table(
        "payments",
        *_audit_columns(),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("method", payment_method, nullable=False),
        sa.Column("status", payment_status, nullable=False),
        sa.Column("transaction_ref", sa.String(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_order_id", "payments", ["order_id"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("order_item_modifiers")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("menu_item_modifier_groups")
    op.drop_table("modifier_options")
    op.drop_table("modifier_groups")
    op.drop_table("menu_items")
    op.drop_table("categories")
    op.drop_table("users")
    op.drop_table("tables")

    bind = op.get_bind()
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
