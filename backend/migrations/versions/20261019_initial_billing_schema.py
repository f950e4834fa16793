"""Initial billing schema: organizations, customers, products, invoices

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

All tenant-owned tables carry org_id. Invoice numbers are unique per
organization (uq_invoices_org_number); invoice creation relies on this
constraint to reject duplicates.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def _money(scale: int = 2):
    return sa.Numeric(14, scale, asdecimal=False)


def upgrade():
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("owner_name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("invoice_prefix", sa.String(2), nullable=False),
        sa.Column("gstin", sa.String(15), nullable=True),
        sa.Column("address", sa.String(512), nullable=True),
        sa.Column("currency", sa.String(16), nullable=False, server_default="INR"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_organizations_name"),
        sa.UniqueConstraint("email", name="uq_organizations_email"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_organizations_is_active", "organizations", ["is_active"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("address", sa.String(512), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("org_id", "email", name="uq_customers_org_email"),
        sa.UniqueConstraint("org_id", "phone", name="uq_customers_org_phone"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_customers_org_id", "customers", ["org_id"])
    op.create_index("ix_customers_org_name", "customers", ["org_id", "name"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("stock_quantity", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("unit_of_measure", sa.String(32), nullable=False),
        sa.Column("alternate_unit", sa.String(32), nullable=True),
        sa.Column("conversion_rate", sa.Float(), nullable=True),
        sa.Column("cost_price", _money(), nullable=False),
        sa.Column("sales_price", _money(), nullable=False),
        sa.Column("tax_rate", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("tax_type", sa.String(32), nullable=False),
        sa.Column("discount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("supplier", sa.String(255), nullable=True),
        sa.Column("batch_number", sa.String(64), nullable=True),
        sa.Column("manufacturer", sa.String(255), nullable=True),
        sa.Column("reorder_quantity", sa.Float(), nullable=True),
        sa.Column("total_stock_value", _money(), nullable=False, server_default=sa.text("0")),
        sa.Column("discounted_price", _money(), nullable=False, server_default=sa.text("0")),
        sa.Column("selling_price", _money(), nullable=False),
        sa.Column("alternate_unit_cost", _money(4), nullable=True),
        sa.Column("alternate_unit_sales_price", _money(4), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("org_id", "name", name="uq_products_org_name"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_products_org_id", "products", ["org_id"])
    op.create_index("ix_products_org_category", "products", ["org_id", "category"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("invoice_number", sa.String(64), nullable=False),
        sa.Column("sub_total", _money(), nullable=False),
        sa.Column("tax_amount", _money(), nullable=False),
        sa.Column("discount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_amount", _money(), nullable=False),
        sa.Column("payment_method", sa.String(32), nullable=True),
        sa.Column("payment_status", sa.String(16), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("org_id", "invoice_number", name="uq_invoices_org_number"),
        sa.CheckConstraint(
            "payment_method IS NULL OR payment_method IN ('Cash', 'Credit Card', 'UPI', 'Bank Transfer')",
            name="ck_invoices_payment_method",
        ),
        sa.CheckConstraint(
            "payment_status IS NULL OR payment_status IN ('Paid', 'Pending', 'Cancelled')",
            name="ck_invoices_payment_status",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_invoices_org_id", "invoices", ["org_id"])
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_payment_status", "invoices", ["payment_status"])
    op.create_index("ix_invoices_org_created", "invoices", ["org_id", "created_at"])

    op.create_table(
        "invoice_lines",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("invoice_id", sa.Integer(), nullable=False),
        sa.Column("sr_no", sa.Integer(), nullable=False),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(32), nullable=True),
        sa.Column("qty", sa.Float(), nullable=False),
        sa.Column("unit_price", _money(4), nullable=False),
        sa.Column("tax", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_price", _money(4), nullable=False),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_invoice_lines_invoice_id", "invoice_lines", ["invoice_id"])


def downgrade():
    op.drop_index("ix_invoice_lines_invoice_id", table_name="invoice_lines")
    op.drop_table("invoice_lines")

    op.drop_index("ix_invoices_org_created", table_name="invoices")
    op.drop_index("ix_invoices_payment_status", table_name="invoices")
    op.drop_index("ix_invoices_customer_id", table_name="invoices")
    op.drop_index("ix_invoices_org_id", table_name="invoices")
    op.drop_table("invoices")

    op.drop_index("ix_products_org_category", table_name="products")
    op.drop_index("ix_products_org_id", table_name="products")
    op.drop_table("products")

    op.drop_index("ix_customers_org_name", table_name="customers")
    op.drop_index("ix_customers_org_id", table_name="customers")
    op.drop_table("customers")

    op.drop_index("ix_organizations_is_active", table_name="organizations")
    op.drop_table("organizations")
