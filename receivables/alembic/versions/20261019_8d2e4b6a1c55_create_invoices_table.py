"""create invoices and invoice number sequence tables

Revision ID: 8d2e4b6a1c55
Revises: 3f9a1c2d7b10
Create Date: 2026-10-19 09:05:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8d2e4b6a1c55"
down_revision = "3f9a1c2d7b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=50), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=False),
        sa.Column("customer_phone", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("amount_due", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("payment_status", sa.String(length=20), nullable=False),
        sa.Column("payment_link", sa.String(length=500), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("payment_link"),
    )
    op.create_index(op.f("ix_invoices_invoice_id"), "invoices", ["invoice_id"], unique=True)
    op.create_index(op.f("ix_invoices_payment_status"), "invoices", ["payment_status"])
    op.create_index(op.f("ix_invoices_created_at"), "invoices", ["created_at"])

    op.create_table(
        "invoice_number_sequences",
        sa.Column("prefix", sa.String(length=20), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("prefix"),
    )


def downgrade() -> None:
    op.drop_table("invoice_number_sequences")
    op.drop_index(op.f("ix_invoices_created_at"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_payment_status"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_invoice_id"), table_name="invoices")
    op.drop_table("invoices")
