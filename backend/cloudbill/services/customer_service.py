# backend/cloudbill/services/customer_service.py
"""
Customer Service with Multi-Tenant Support

MULTI-TENANT: Customers belong to one organization; email and phone are
unique within it. Invoice creation only needs find_customer.
"""
from __future__ import annotations

from sqlalchemy import func, or_

from ..errors import ConflictError
from ..extensions import db
from ..models import Customer
from ..validation import MAX_INTEGER, ModelValidationPolicy, validate_payload, enforce_rules_customer
from .storage import commit_or_raise
from .tenant_service import scoped_query

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phone", "address"},
    required_on_create={"name", "email", "phone", "address"},
)


def _duplicate_customer() -> ConflictError:
    return ConflictError(
        "Customer already exists with this email or phone number under your organization"
    )


def create_customer(org_id: int, payload: dict) -> Customer:
    data = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY)
    data["email"] = data["email"].lower()
    enforce_rules_customer(data)

    # Friendly early answer; the unique constraints below still decide races
    existing = scoped_query(Customer, org_id).filter(
        or_(Customer.email == data["email"], Customer.phone == data["phone"])
    ).first()
    if existing:
        raise _duplicate_customer()

    customer = Customer(org_id=org_id, **data)
    db.session.add(customer)
    commit_or_raise({
        (Customer, "uq_customers_org_email"): _duplicate_customer,
        (Customer, "uq_customers_org_phone"): _duplicate_customer,
    })
    return customer


def find_customer(org_id: int, customer_id) -> Customer | None:
    """Customer of this organization, or None (also for malformed ids)."""
    if isinstance(customer_id, bool):
        return None
    if isinstance(customer_id, float) and not customer_id.is_integer():
        return None
    try:
        customer_id = int(customer_id)
    except (TypeError, ValueError):
        return None
    if not 1 <= customer_id <= MAX_INTEGER:
        return None
    return scoped_query(Customer, org_id).filter(Customer.id == customer_id).first()


def list_customers(org_id: int, name: str | None = None) -> list[Customer]:
    query = scoped_query(Customer, org_id)
    if name:
        query = query.filter(func.lower(Customer.name).contains(name.strip().lower(), autoescape=True))
    return query.order_by(Customer.name, Customer.id).all()
