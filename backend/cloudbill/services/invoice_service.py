"""
Invoice Service - server-side validated invoice creation

WHY: Clients compute invoice totals for display, but the server must never
trust them. Every invoice is recomputed from its line items and only
committed if the client's numbers agree on subtotal, tax and total.

PIPELINE (create_invoice), fail-fast in this order:
1. Shape checks (line_items present, enums valid, invoice_number given)
2. Customer belongs to the organization
3. Per-item arithmetic: unit_price x qty ~= total_price
4. Aggregate subtotal / tax / discounted total
5. Reconcile against submitted totals (all three must agree)
6. Every product exists in the organization's inventory
7. One insert + commit; the (org_id, invoice_number) unique constraint
   rejects duplicates, including concurrent ones

LIFECYCLE: Active -> Deleted. Invoices are never updated.
"""

from __future__ import annotations

import time

from flask import current_app

from ..errors import CustomerNotFound, DuplicateInvoiceNumber, NotFound, ValidationError
from ..extensions import db
from ..models import Invoice, InvoiceLine, Organization, PAYMENT_METHODS, PAYMENT_STATUSES
from cloudbill.time_utils import utcnow
from .customer_service import find_customer
from .invoice_totals import aggregate, reconcile, submitted_totals
from .line_item_service import ensure_products_exist, parse_line_items, validate_line_item_arithmetic
from .money import to_number
from .storage import commit_or_raise
from .tenant_service import scoped_query

MAX_INVOICE_NUMBER_LENGTH = 64
MAX_CUSTOMER_NAME_LENGTH = Invoice.__table__.c.customer_name.type.length


def _require_invoice_number(raw) -> str:
    number = str(raw).strip() if raw is not None else ""
    if not number:
        raise ValidationError("invoice_number is required")
    if len(number) > MAX_INVOICE_NUMBER_LENGTH:
        raise ValidationError(f"invoice_number exceeds max length {MAX_INVOICE_NUMBER_LENGTH}")
    return number


def _optional_customer_name(raw) -> str | None:
    """Submitted display name, or None to fall back to the customer record."""
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError("customer_name must be a string")
    name = raw.strip()
    if len(name) > MAX_CUSTOMER_NAME_LENGTH:
        raise ValidationError(f"customer_name exceeds max length {MAX_CUSTOMER_NAME_LENGTH}")
    return name or None


def _optional_choice(payload: dict, field: str, choices: tuple[str, ...]) -> str | None:
    value = payload.get(field)
    if value in (None, ""):
        return None
    if value not in choices:
        raise ValidationError(
            f"{field} must be one of: {', '.join(choices)}",
            details={"field": field, "allowed": list(choices)},
        )
    return value


def _discount_percent(payload: dict) -> float:
    discount = to_number(payload.get("discount"))
    if not 0 <= discount <= 100:
        raise ValidationError("discount must be between 0 and 100")
    return discount


def create_invoice(org_id: int, payload: dict) -> Invoice:
    """
    Validate and persist an invoice for the organization.

    The stored sub_total / tax_amount / total_amount are the recomputed values.

    Raises:
        ValidationError, CustomerNotFound, ItemArithmeticMismatch,
        TotalsMismatch, ProductNotFound, DuplicateInvoiceNumber, StorageError
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    items = parse_line_items(payload.get("line_items"))
    invoice_number = _require_invoice_number(payload.get("invoice_number"))
    payment_method = _optional_choice(payload, "payment_method", PAYMENT_METHODS)
    payment_status = _optional_choice(payload, "payment_status", PAYMENT_STATUSES)
    discount = _discount_percent(payload)
    customer_name = _optional_customer_name(payload.get("customer_name"))

    customer = find_customer(org_id, payload.get("customer_id"))
    if customer is None:
        raise CustomerNotFound(
            "Customer does not exist",
            details={"customer_id": payload.get("customer_id")},
        )

    for item in items:
        validate_line_item_arithmetic(item)

    computed = aggregate(items, discount)
    reconcile(computed, submitted_totals(payload))

    ensure_products_exist(org_id, items)

    invoice = Invoice(
        org_id=org_id,
        customer_id=customer.id,
        customer_name=customer_name or customer.name,
        invoice_number=invoice_number,
        sub_total=computed.subtotal,
        tax_amount=computed.tax,
        discount=discount,
        total_amount=computed.total,
        payment_method=payment_method,
        payment_status=payment_status,
        created_at=utcnow(),
        lines=[InvoiceLine(**item.to_row()) for item in items],
    )

    db.session.add(invoice)
    commit_or_raise({
        (Invoice, "uq_invoices_org_number"): lambda: DuplicateInvoiceNumber(
            "Invoice already exists with this invoice number",
            details={"invoice_number": invoice_number},
        ),
    })

    current_app.logger.info(
        "Invoice %s created for org %s (total=%.2f, lines=%d)",
        invoice.invoice_number, org_id, invoice.total_amount, len(items),
    )
    return invoice


def list_invoices(org_id: int) -> list[Invoice]:
    """
    All invoices of the organization, newest first.

    An empty result is an empty list unless INVOICES_EMPTY_LIST_IS_NOT_FOUND
    is set, in which case it raises NotFound.
    """
    invoices = (
        scoped_query(Invoice, org_id)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .all()
    )
    if not invoices and current_app.config.get("INVOICES_EMPTY_LIST_IS_NOT_FOUND"):
        raise NotFound("No invoices found")
    return invoices


def find_invoice(org_id: int, invoice_number: str) -> Invoice | None:
    return (
        scoped_query(Invoice, org_id)
        .filter(Invoice.invoice_number == invoice_number)
        .first()
    )


def get_invoice(org_id: int, invoice_number: str) -> Invoice:
    invoice = find_invoice(org_id, invoice_number)
    if invoice is None:
        raise NotFound("Invoice not found", details={"invoice_number": invoice_number})
    return invoice


def remove_invoice(org_id: int, invoice_number: str) -> None:
    invoice = get_invoice(org_id, invoice_number)
    db.session.delete(invoice)
    commit_or_raise()
    current_app.logger.info("Invoice %s removed for org %s", invoice_number, org_id)


def suggest_invoice_number(org: Organization) -> str:
    """'<PREFIX>-<epoch millis>', the numbering scheme the web client uses."""
    prefix = org.invoice_prefix or "INV"
    return f"{prefix}-{int(time.time() * 1000)}"
