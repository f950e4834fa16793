"""
Multi-Tenant Service: tenant resolution and scoping helpers.

Every tenant-scoped request carries an organization id, and every query over
customers, products and invoices filters by it. Service functions take org_id
as a required argument; nothing here offers an unscoped query.

USAGE:
    from cloudbill.services.tenant_service import scoped_query

    invoices = scoped_query(Invoice, g.org_id).all()
"""

from __future__ import annotations

from ..errors import TenantAccessError
from ..extensions import db
from ..models import Organization
from ..validation import MAX_INTEGER


def parse_org_id(raw) -> int:
    if raw is None or str(raw).strip() == "":
        raise TenantAccessError("Organization context required")
    try:
        org_id = int(str(raw).strip())
    except ValueError:
        raise TenantAccessError("Invalid organization id")
    if not 1 <= org_id <= MAX_INTEGER:
        raise TenantAccessError("Invalid organization id")
    return org_id


def validate_org_active(org_id: int) -> Organization:
    """
    Validate that an organization exists and is active.

    Raises TenantAccessError if org doesn't exist or is inactive.
    """
    org = db.session.get(Organization, org_id)

    if not org:
        raise TenantAccessError("Organization not found")

    if not org.is_active:
        raise TenantAccessError("Organization is not active")

    return org


def scoped_query(model, org_id: int):
    """
    Base query over an org-owned model, filtered to one tenant.

    org_id is mandatory: a None tenant is a programming error, not "all tenants".
    """
    if org_id is None:
        raise TenantAccessError("Tenant context not established")
    return db.session.query(model).filter(model.org_id == org_id)
