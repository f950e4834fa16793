from __future__ import annotations

from ..extensions import db
from cloudbill.time_utils import to_utc_z


class Organization(db.Model):
    """
    Multi-tenant root: every tenant is an Organization.

    All customers, products and invoices carry org_id and every query over
    them filters by it. No data may cross organization boundaries.
    """
    __tablename__ = "organizations"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_organizations_name"),
        db.UniqueConstraint("email", name="uq_organizations_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)  # stored lower-cased
    email = db.Column(db.String(255), nullable=False)  # stored lower-cased
    phone = db.Column(db.String(32), nullable=False)
    owner_name = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    # Used to build suggested invoice numbers ("AC-1718000000000")
    invoice_prefix = db.Column(db.String(2), nullable=False)

    gstin = db.Column(db.String(15), nullable=True)
    address = db.Column(db.String(512), nullable=True)
    currency = db.Column(db.String(16), nullable=False, default="INR")

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "owner_name": self.owner_name,
            "invoice_prefix": self.invoice_prefix,
            "gstin": self.gstin,
            "address": self.address,
            "currency": self.currency,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
