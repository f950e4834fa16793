# Overview: Pytest coverage for organization registration and password hashing.

import pytest

from cloudbill.errors import ConflictError, ValidationError
from cloudbill.services import organization_service


def _org_payload(**overrides) -> dict:
    payload = {
        "name": "  Green   Grocers ",
        "email": "Owner@Green.test",
        "phone": "9855555555",
        "owner_name": "Asha",
        "password": "correct horse",
    }
    payload.update(overrides)
    return payload


class TestRegisterOrganization:
    def test_registers_with_defaults(self, db_session):
        org = organization_service.register_organization(_org_payload())

        assert org.id is not None
        assert org.name == "green grocers"
        assert org.email == "owner@green.test"
        assert org.invoice_prefix == "GR"
        assert org.currency == "INR"
        assert org.is_active is True

    def test_password_is_hashed(self, db_session):
        org = organization_service.register_organization(_org_payload())

        assert org.password_hash != "correct horse"
        assert organization_service.verify_password(org, "correct horse")
        assert not organization_service.verify_password(org, "wrong horse")
        assert "password_hash" not in org.to_dict()

    def test_explicit_prefix_is_upper_cased(self, db_session):
        org = organization_service.register_organization(_org_payload(invoice_prefix="gg"))
        assert org.invoice_prefix == "GG"

    def test_prefix_too_long(self, db_session):
        with pytest.raises(ValidationError):
            organization_service.register_organization(_org_payload(invoice_prefix="GRO"))

    def test_short_password(self, db_session):
        with pytest.raises(ValidationError, match="Password"):
            organization_service.register_organization(_org_payload(password="short"))

    def test_missing_password(self, db_session):
        payload = _org_payload()
        del payload["password"]
        with pytest.raises(ValidationError):
            organization_service.register_organization(payload)

    def test_gstin_length(self, db_session):
        with pytest.raises(ValidationError, match="GSTIN"):
            organization_service.register_organization(_org_payload(gstin="22AAAAA0000A1Z"))

        org = organization_service.register_organization(_org_payload(gstin="22AAAAA0000A1Z5"))
        assert org.gstin == "22AAAAA0000A1Z5"

    def test_duplicate_name(self, db_session):
        organization_service.register_organization(_org_payload())
        with pytest.raises(ConflictError):
            organization_service.register_organization(_org_payload(name="green grocers", email="new@green.test"))

    def test_duplicate_email(self, db_session):
        organization_service.register_organization(_org_payload())
        with pytest.raises(ConflictError):
            organization_service.register_organization(_org_payload(name="Other Shop", email="OWNER@green.test"))


class TestDefaultInvoicePrefix:
    @pytest.mark.parametrize("name,expected", [
        ("acme traders", "AC"),
        ("9 to 5 mart", "9T"),
        ("x", "X"),
        ("!!", "IN"),
    ])
    def test_prefix(self, name, expected):
        assert organization_service.default_invoice_prefix(name) == expected
