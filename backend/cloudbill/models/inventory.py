from __future__ import annotations

from ..extensions import db
from cloudbill.time_utils import to_utc_z


class Product(db.Model):
    """
    Inventory item owned by an organization.

    MULTI-TENANT: Products are scoped to organizations via org_id.
    Names are stored lower-cased and trimmed, so UniqueConstraint("org_id", "name")
    makes them unique per organization regardless of case.

    DERIVED PRICING: total_stock_value, discounted_price, selling_price and the
    alternate-unit prices are never written directly. Call recompute_derived()
    after changing any input column.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("org_id", "name", name="uq_products_org_name"),
        db.Index("ix_products_org_category", "org_id", "category"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    org_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)

    stock_quantity = db.Column(db.Float, nullable=False, default=0)
    unit_of_measure = db.Column(db.String(32), nullable=False)  # e.g. "kg"

    # 1 unit_of_measure == conversion_rate alternate_unit (e.g. 1 kg == 1000 gm)
    alternate_unit = db.Column(db.String(32), nullable=True)
    conversion_rate = db.Column(db.Float, nullable=True)

    cost_price = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False)
    sales_price = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False)
    tax_rate = db.Column(db.Float, nullable=False, default=0)  # percent
    tax_type = db.Column(db.String(32), nullable=False)
    discount = db.Column(db.Float, nullable=False, default=0)  # percent

    supplier = db.Column(db.String(255), nullable=True)
    batch_number = db.Column(db.String(64), nullable=True)
    manufacturer = db.Column(db.String(255), nullable=True)
    reorder_quantity = db.Column(db.Float, nullable=True)

    # Derived
    total_stock_value = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    discounted_price = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    selling_price = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False)
    alternate_unit_cost = db.Column(db.Numeric(14, 4, asdecimal=False), nullable=True)
    alternate_unit_sales_price = db.Column(db.Numeric(14, 4, asdecimal=False), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    organization = db.relationship("Organization", backref=db.backref("products", lazy=True))

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} org_id={self.org_id}>"

    def recompute_derived(self) -> None:
        stock = float(self.stock_quantity or 0)
        cost = float(self.cost_price or 0)
        sales = float(self.sales_price or 0)
        discount = float(self.discount or 0)
        tax_rate = float(self.tax_rate or 0)

        self.total_stock_value = stock * cost

        if discount > 0:
            discounted = sales - (discount / 100) * sales
            self.discounted_price = discounted
            self.selling_price = discounted + (tax_rate / 100) * discounted
        else:
            self.discounted_price = 0
            self.selling_price = sales

        if self.alternate_unit and self.conversion_rate:
            rate = float(self.conversion_rate)
            self.alternate_unit_cost = cost / rate
            self.alternate_unit_sales_price = sales / rate
        else:
            # No alternate unit, or a zero rate that cannot be divided by
            self.alternate_unit_cost = None
            self.alternate_unit_sales_price = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "org_id": self.org_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "stock_quantity": self.stock_quantity,
            "unit_of_measure": self.unit_of_measure,
            "alternate_unit": self.alternate_unit,
            "conversion_rate": self.conversion_rate,
            "cost_price": self.cost_price,
            "sales_price": self.sales_price,
            "tax_rate": self.tax_rate,
            "tax_type": self.tax_type,
            "discount": self.discount,
            "supplier": self.supplier,
            "batch_number": self.batch_number,
            "manufacturer": self.manufacturer,
            "reorder_quantity": self.reorder_quantity,
            "total_stock_value": self.total_stock_value,
            "discounted_price": self.discounted_price,
            "selling_price": self.selling_price,
            "alternate_unit_cost": self.alternate_unit_cost,
            "alternate_unit_sales_price": self.alternate_unit_sales_price,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
