"""
Pytest fixtures for CloudBill backend tests.

Provides test database setup, two-tenant fixtures and a test client.
"""

import pytest

from cloudbill import create_app
from cloudbill.extensions import db
from cloudbill.models import Organization, Customer, Product


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
        'INVOICES_EMPTY_LIST_IS_NOT_FOUND': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def _make_org(db_session, name: str, email: str, prefix: str) -> Organization:
    org = Organization(
        name=name,
        email=email,
        phone="9000000000",
        owner_name="Owner",
        password_hash="x",
        invoice_prefix=prefix,
        is_active=True,
    )
    db_session.add(org)
    db_session.commit()
    return org


def _make_product(db_session, org: Organization, name: str, sales_price: float, tax_rate: float) -> Product:
    product = Product(
        org_id=org.id,
        name=name,
        category="grocery",
        stock_quantity=100,
        unit_of_measure="kg",
        cost_price=sales_price / 2,
        sales_price=sales_price,
        tax_rate=tax_rate,
        tax_type="GST",
        discount=0,
    )
    product.recompute_derived()
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def org_a(db_session):
    """Create Organization A (first tenant)."""
    return _make_org(db_session, "acme traders", "owner@acme.test", "AC")


@pytest.fixture(scope='function')
def org_b(db_session):
    """Create Organization B (second tenant)."""
    return _make_org(db_session, "beta stores", "owner@beta.test", "BE")


@pytest.fixture(scope='function')
def customer_a(db_session, org_a):
    customer = Customer(
        org_id=org_a.id,
        name="Ravi Kumar",
        email="ravi@example.com",
        phone="9811111111",
        address="12 MG Road",
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def customer_b(db_session, org_b):
    customer = Customer(
        org_id=org_b.id,
        name="Meera Shah",
        email="meera@example.com",
        phone="9822222222",
        address="4 Park Street",
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def products_a(db_session, org_a):
    """Inventory of Organization A: basmati rice and sugar."""
    return [
        _make_product(db_session, org_a, "basmati rice", 10, 10),
        _make_product(db_session, org_a, "sugar", 5, 0),
    ]


@pytest.fixture(scope='function')
def products_b(db_session, org_b):
    """Inventory of Organization B: the same names as A, owned separately."""
    return [
        _make_product(db_session, org_b, "basmati rice", 10, 10),
        _make_product(db_session, org_b, "sugar", 5, 0),
    ]


def invoice_payload(customer_id, invoice_number="INV-1", **overrides) -> dict:
    """
    Two-line invoice whose client totals are correct:
    rice 10 x 2 @ 10% tax, sugar 5 x 1 @ 0% -> 25.00 / 2.00 / 27.00.
    """
    payload = {
        "customer_id": customer_id,
        "customer_name": "Ravi Kumar",
        "invoice_number": invoice_number,
        "sub_total": 25,
        "tax_amount": 2,
        "total_amount": 27,
        "discount": 0,
        "payment_method": "Cash",
        "payment_status": "Paid",
        "line_items": [
            {"sr_no": 1, "product_name": "Basmati Rice", "unit": "kg", "qty": 2, "tax": 10,
             "unit_price": 10, "total_price": 20},
            {"sr_no": 2, "product_name": "Sugar", "unit": "kg", "qty": 1, "tax": 0,
             "unit_price": 5, "total_price": 5},
        ],
    }
    payload.update(overrides)
    return payload


def org_headers(org) -> dict:
    """Helper to create tenant headers."""
    return {'X-Organization-Id': str(org.id)}
