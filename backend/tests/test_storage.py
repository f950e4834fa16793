# Overview: Pytest coverage for commit error mapping and session cleanup.

import pytest

from cloudbill.errors import ConflictError, StorageError
from cloudbill.extensions import db
from cloudbill.models import Customer, Organization
from cloudbill.services.storage import commit_or_raise


def _customer(org, **overrides) -> Customer:
    fields = {
        "org_id": org.id,
        "name": "Anil Mehta",
        "email": "anil@example.com",
        "phone": "9833333333",
        "address": "7 Lake Road",
    }
    fields.update(overrides)
    return Customer(**fields)


class TestCommitOrRaise:
    def test_mapped_unique_violation(self, db_session, org_a, customer_a):
        db_session.add(_customer(org_a, email=customer_a.email))

        with pytest.raises(ConflictError, match="taken"):
            commit_or_raise({
                (Customer, "uq_customers_org_email"): lambda: ConflictError("taken"),
            })

        assert db_session.query(Customer).count() == 1

    def test_unmapped_integrity_error_is_storage_error(self, db_session, org_a, customer_a):
        db_session.add(_customer(org_a, phone=customer_a.phone))

        with pytest.raises(StorageError) as exc:
            commit_or_raise({
                (Customer, "uq_customers_org_email"): lambda: ConflictError("taken"),
            })

        assert exc.value.details == {"reason": "integrity"}

    def test_unexpected_driver_error_rolls_back(self, db_session, org_a, monkeypatch):
        db_session.add(_customer(org_a))

        def failing_commit():
            raise OverflowError("Python int too large to convert to SQLite INTEGER")

        monkeypatch.setattr(db.session(), "commit", failing_commit)

        with pytest.raises(OverflowError):
            commit_or_raise()

        monkeypatch.undo()
        assert not db_session.new
        assert db_session.query(Customer).count() == 0
        assert db_session.query(Organization).count() == 1
