"""Initial schema — accounts, catalog, carts, orders, payments, feedback, exams.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "admins",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("uni_id", sa.String(30), nullable=False, unique=True),
        sa.Column("phone_no", sa.String(20), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("semester", sa.String(10), nullable=True),
        sa.Column("is_privileged", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("privilege_reason", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "canteens",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("contact_number", sa.String(20), nullable=True),
        sa.Column("availability", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("opening_time", sa.String(10), nullable=True),
        sa.Column("closing_time", sa.String(10), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("image_public_id", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("average_rating", sa.Float, nullable=False, server_default="0"),
        sa.Column("total_ratings", sa.Integer, nullable=False, server_default="0"),
        sa.Column("food_quality", sa.Float, nullable=False, server_default="0"),
        sa.Column("service_speed", sa.Float, nullable=False, server_default="0"),
        sa.Column("app_experience", sa.Float, nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "canteen_staff",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("canteen_id", UUID(as_uuid=True), sa.ForeignKey("canteens.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contact_number", sa.String(20), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("member_id", sa.String(50), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "menu_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("item_code", sa.String(36), nullable=False, unique=True),
        sa.Column("item_name", sa.String(100), nullable=False),
        sa.Column("canteen_id", UUID(as_uuid=True), sa.ForeignKey("canteens.id", ondelete="CASCADE"), nullable=False),
        sa.Column("availability", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("image_public_id", sa.String(255), nullable=True),
        sa.Column("preparation_time", sa.Integer, nullable=False, server_default="10"),
        sa.Column("is_vegetarian", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_menu_items_canteen_id", "menu_items", ["canteen_id"])

    op.create_table(
        "carts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("cart_id", UUID(as_uuid=True), sa.ForeignKey("carts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", UUID(as_uuid=True), nullable=False),
        sa.Column("canteen_id", UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("image_url", sa.String(500), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 1", name="ck_cart_items_quantity"),
    )

    op.create_table(
        "exam_details",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("exam_code", sa.String(36), nullable=False, unique=True),
        sa.Column("exam_name", sa.String(200), nullable=False),
        sa.Column("exam_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("exam_time", sa.String(20), nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("semester", sa.String(10), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_university_id", sa.String(30), nullable=False),
        sa.Column("end_university_id", sa.String(30), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_exam_details_exam_date", "exam_details", ["exam_date"])

    op.create_table(
        "orders",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_code", sa.String(36), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("order_date", sa.String(20), nullable=False),
        sa.Column("order_time", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("total_amount", sa.Float, nullable=False),
        sa.Column("canteen_id", UUID(as_uuid=True), nullable=False),
        sa.Column("exam_id", UUID(as_uuid=True), sa.ForeignKey("exam_details.id", ondelete="SET NULL"), nullable=True),
        sa.Column("priority", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("priority_reason", sa.String(20), nullable=True),
        sa.Column("priority_details", sa.Text, nullable=True),
        sa.Column("pickup_time", sa.String(20), nullable=True),
        sa.Column("special_instructions", sa.Text, nullable=True),
        sa.Column("delivery_address", sa.Text, nullable=False),
        sa.Column("priority_fee", sa.Integer, nullable=False, server_default="0"),
        sa.Column("placed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
    )
    op.create_index("ix_orders_email", "orders", ["email"])
    op.create_index("ix_orders_canteen_id", "orders", ["canteen_id"])

    op.create_table(
        "order_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_id", UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", UUID(as_uuid=True), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("item_name", sa.String(100), nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        sa.CheckConstraint("price >= 0", name="ck_order_items_price"),
    )

    op.create_table(
        "payments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_id", UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("payment_date", sa.String(20), nullable=False),
        sa.Column("payment_time", sa.String(20), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("transaction_id", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("gateway_order_id", sa.String(100), nullable=True),
        sa.Column("gateway_payment_id", sa.String(100), nullable=True, unique=True),
        sa.Column("gateway_signature", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_payments_order_id", "payments", ["order_id"])
    op.create_index("ix_payments_email", "payments", ["email"])

    op.create_table(
        "feedback",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_id", UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("canteen_id", UUID(as_uuid=True), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("food_quality", sa.Integer, nullable=True),
        sa.Column("service_speed", sa.Integer, nullable=True),
        sa.Column("app_experience", sa.Integer, nullable=True),
        sa.Column("is_resolved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("staff_response", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("order_id", "email", name="uq_feedback_order_email"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )
    op.create_index("ix_feedback_email", "feedback", ["email"])
    op.create_index("ix_feedback_canteen_id", "feedback", ["canteen_id"])


def downgrade() -> None:
    for table in (
        "feedback", "payments", "order_items", "orders", "exam_details",
        "cart_items", "carts", "menu_items", "canteen_staff", "canteens",
        "users", "admins",
    ):
        op.drop_table(table)
