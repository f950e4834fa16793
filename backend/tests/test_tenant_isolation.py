"""
Tests for multi-tenant isolation.

Ensures that invoices, customers and products of one organization are never
visible to, or changeable by, another organization.
"""

import pytest

from cloudbill.errors import NotFound, ProductNotFound, TenantAccessError
from cloudbill.models import Invoice
from cloudbill.services import invoice_service
from cloudbill.services.tenant_service import parse_org_id, scoped_query, validate_org_active
from tests.conftest import invoice_payload, org_headers


@pytest.fixture
def both_invoiced(db_session, org_a, org_b, customer_a, customer_b, products_a, products_b):
    """Each organization owns an invoice numbered INV-1."""
    a = invoice_service.create_invoice(org_a.id, invoice_payload(customer_a.id))
    b = invoice_service.create_invoice(
        org_b.id, invoice_payload(customer_b.id, customer_name="Meera Shah", total_amount=27)
    )
    return a, b


class TestServiceIsolation:
    def test_get_returns_own_invoice(self, org_a, org_b, both_invoiced):
        a, b = both_invoiced
        assert invoice_service.get_invoice(org_a.id, "INV-1").id == a.id
        assert invoice_service.get_invoice(org_b.id, "INV-1").id == b.id

    def test_list_is_scoped(self, org_a, both_invoiced):
        a, _ = both_invoiced
        assert [invoice.id for invoice in invoice_service.list_invoices(org_a.id)] == [a.id]

    def test_remove_only_touches_own_invoice(self, db_session, org_a, org_b, both_invoiced):
        _, b = both_invoiced
        invoice_service.remove_invoice(org_a.id, "INV-1")

        remaining = db_session.query(Invoice).all()
        assert [invoice.id for invoice in remaining] == [b.id]

    def test_remove_of_foreign_number_is_not_found(self, db_session, org_a, org_b, customer_b, products_b):
        invoice_service.create_invoice(org_b.id, invoice_payload(customer_b.id, invoice_number="B-ONLY"))

        with pytest.raises(NotFound):
            invoice_service.remove_invoice(org_a.id, "B-ONLY")

        assert invoice_service.get_invoice(org_b.id, "B-ONLY") is not None

    def test_products_of_other_org_do_not_satisfy_line_items(self, db_session, org_a, customer_a, products_b):
        with pytest.raises(ProductNotFound):
            invoice_service.create_invoice(org_a.id, invoice_payload(customer_a.id))

    def test_scoped_query_requires_org(self, db_session):
        with pytest.raises(TenantAccessError):
            scoped_query(Invoice, None)


class TestTenantContext:
    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", "1.5", "0", "-4", str(10**30)])
    def test_parse_rejects_malformed(self, raw):
        with pytest.raises(TenantAccessError):
            parse_org_id(raw)

    def test_parse_accepts_digits(self):
        assert parse_org_id(" 42 ") == 42

    def test_inactive_org_rejected(self, db_session, org_a):
        org_a.is_active = False
        db_session.commit()
        with pytest.raises(TenantAccessError, match="not active"):
            validate_org_active(org_a.id)

    def test_unknown_org_rejected(self, db_session):
        with pytest.raises(TenantAccessError):
            validate_org_active(999999)


class TestHttpIsolation:
    def test_header_selects_tenant(self, client, org_a, org_b, both_invoiced):
        a, b = both_invoiced

        response = client.get("/api/invoices/INV-1", headers=org_headers(org_b))

        assert response.status_code == 200
        assert response.get_json()["invoice"]["id"] == b.id

    def test_customer_of_other_org_is_404(self, client, org_a, customer_b):
        response = client.get(f"/api/customers/{customer_b.id}", headers=org_headers(org_a))
        assert response.status_code == 404

    def test_product_of_other_org_is_404(self, client, org_a, products_b):
        response = client.get(f"/api/products/{products_b[0].id}", headers=org_headers(org_a))
        assert response.status_code == 404
