from __future__ import annotations

from ..extensions import db
from cloudbill.time_utils import to_utc_z, utcnow


PAYMENT_METHODS = ("Cash", "Credit Card", "UPI", "Bank Transfer")
PAYMENT_STATUSES = ("Paid", "Pending", "Cancelled")


class Invoice(db.Model):
    """
    Issued invoice.

    MULTI-TENANT: Invoices are scoped to organizations via org_id.
    Invoice numbers are unique within an organization; the constraint below is
    the only guard against duplicates, so concurrent creates cannot both win.

    IMMUTABLE: Invoices are written once and then only read or deleted.
    sub_total, tax_amount and total_amount are the server-computed values.
    """
    __tablename__ = "invoices"
    __table_args__ = (
        db.UniqueConstraint("org_id", "invoice_number", name="uq_invoices_org_number"),
        db.Index("ix_invoices_org_created", "org_id", "created_at"),
        db.CheckConstraint(
            "payment_method IS NULL OR payment_method IN ('Cash', 'Credit Card', 'UPI', 'Bank Transfer')",
            name="ck_invoices_payment_method",
        ),
        db.CheckConstraint(
            "payment_status IS NULL OR payment_status IN ('Paid', 'Pending', 'Cancelled')",
            name="ck_invoices_payment_status",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    org_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=True)

    invoice_number = db.Column(db.String(64), nullable=False)

    sub_total = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False)
    tax_amount = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False)
    discount = db.Column(db.Float, nullable=False, default=0)  # percent
    total_amount = db.Column(db.Numeric(14, 2, asdecimal=False), nullable=False)

    payment_method = db.Column(db.String(32), nullable=True)
    payment_status = db.Column(db.String(16), nullable=True, index=True)

    # Server timestamp, assigned in Python so ordering is stable on SQLite too
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    organization = db.relationship("Organization", backref=db.backref("invoices", lazy=True))
    customer = db.relationship("Customer", backref=db.backref("invoices", lazy=True))
    lines = db.relationship(
        "InvoiceLine",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLine.sr_no",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} number={self.invoice_number!r} org_id={self.org_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "org_id": self.org_id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "invoice_number": self.invoice_number,
            "sub_total": self.sub_total,
            "tax_amount": self.tax_amount,
            "discount": self.discount,
            "total_amount": self.total_amount,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "created_at": to_utc_z(self.created_at),
            "line_items": [line.to_dict() for line in self.lines],
        }


class InvoiceLine(db.Model):
    """
    One product row of an invoice.

    product_name is the free text captured at invoice time, not a live
    reference to Product; later inventory edits never change issued invoices.
    """
    __tablename__ = "invoice_lines"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(
        db.Integer,
        db.ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sr_no = db.Column(db.Integer, nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    unit = db.Column(db.String(32), nullable=True)
    qty = db.Column(db.Float, nullable=False)
    unit_price = db.Column(db.Numeric(14, 4, asdecimal=False), nullable=False)
    tax = db.Column(db.Float, nullable=False, default=0)  # percent
    total_price = db.Column(db.Numeric(14, 4, asdecimal=False), nullable=False)

    invoice = db.relationship("Invoice", back_populates="lines")

    def to_dict(self) -> dict:
        return {
            "sr_no": self.sr_no,
            "product_name": self.product_name,
            "unit": self.unit,
            "qty": self.qty,
            "unit_price": self.unit_price,
            "tax": self.tax,
            "total_price": self.total_price,
        }
