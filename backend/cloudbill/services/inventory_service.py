# backend/cloudbill/services/inventory_service.py
"""
Inventory Service with Multi-Tenant Support

MULTI-TENANT: All product operations are tenant-scoped by org_id.

Product names are normalized (trimmed, lower-cased) on the way in, so the
per-organization unique constraint is case-insensitive and name lookups can
compare lower-case text.
"""
from __future__ import annotations

from sqlalchemy import func

from ..errors import ConflictError
from ..extensions import db
from ..models import Product
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_product
from .storage import commit_or_raise
from .tenant_service import scoped_query

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "category", "description", "stock_quantity", "unit_of_measure",
        "alternate_unit", "conversion_rate", "cost_price", "sales_price",
        "tax_rate", "tax_type", "discount", "supplier", "batch_number",
        "manufacturer", "reorder_quantity",
    },
    required_on_create={
        "name", "category", "unit_of_measure", "sales_price", "cost_price",
        "stock_quantity", "tax_rate", "tax_type",
    },
)


def normalize_product_name(name: str) -> str:
    return " ".join(name.split()).lower()


def create_product(org_id: int, payload: dict) -> Product:
    """
    Create a product for the organization and compute its derived prices.

    Raises:
        ValidationError: missing/invalid fields, alternate unit without rate
        ConflictError: another product of this organization has the same name
    """
    data = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY)
    enforce_rules_product(data)

    data["name"] = normalize_product_name(data["name"])
    data["category"] = data["category"].lower()
    if data.get("discount") is None:
        data["discount"] = 0

    product = Product(org_id=org_id, **data)
    product.recompute_derived()

    db.session.add(product)
    commit_or_raise({
        (Product, "uq_products_org_name"): lambda: ConflictError(
            "Product already exists with this name",
            details={"name": data["name"]},
        ),
    })
    return product


def get_product(org_id: int, product_id: int) -> Product | None:
    return scoped_query(Product, org_id).filter(Product.id == product_id).first()


def find_product_by_name(org_id: int, name: str) -> Product | None:
    """
    Case-insensitive substring lookup within one organization.

    The name is matched literally (LIKE wildcards are escaped). Shortest
    name first, so an exact match wins over a longer name containing it.
    """
    needle = normalize_product_name(name or "")
    if not needle:
        return None

    return (
        scoped_query(Product, org_id)
        .filter(func.lower(Product.name).contains(needle, autoescape=True))
        .order_by(func.length(Product.name), Product.id)
        .first()
    )


def list_products(org_id: int, name: str | None = None) -> list[Product]:
    query = scoped_query(Product, org_id)
    if name:
        needle = normalize_product_name(name)
        query = query.filter(func.lower(Product.name).contains(needle, autoescape=True))
    return query.order_by(Product.name).all()
