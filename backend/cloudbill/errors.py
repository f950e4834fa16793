"""
Request-rejection errors raised by the service layer.

Every error carries a stable ``kind`` (what API clients switch on), an HTTP
status code, a human-readable message and optional structured details.
Routes render them with ``error_response``; nothing here is process-fatal.
"""

from __future__ import annotations


class BillingError(Exception):
    """Base class for all business-rule and storage rejections."""

    status_code = 400
    kind = "BillingError"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "kind": self.kind,
            "details": self.details,
        }


class ValidationError(BillingError, ValueError):
    """400-level input problem (malformed shape, missing fields)."""

    kind = "ValidationError"


class ConflictError(BillingError, ValueError):
    """409-level uniqueness conflict (duplicate product name, customer email...)."""

    status_code = 409
    kind = "ConflictError"


class NotFound(BillingError):
    status_code = 404
    kind = "NotFound"


class CustomerNotFound(NotFound):
    kind = "CustomerNotFound"


class DuplicateInvoiceNumber(ConflictError):
    kind = "DuplicateInvoiceNumber"


class ItemArithmeticMismatch(BillingError):
    """unit_price x qty disagrees with the stated line total."""

    kind = "ItemArithmeticMismatch"


class ProductNotFound(BillingError):
    """A line item names a product the organization does not stock."""

    kind = "ProductNotFound"


class TotalsMismatch(BillingError):
    """Client-submitted totals disagree with the recomputed ones."""

    kind = "TotalsMismatch"


class StorageError(BillingError):
    """The database failed for reasons unrelated to the request's content."""

    status_code = 503
    kind = "StorageError"


class TenantAccessError(BillingError):
    """Missing, unknown or inactive tenant context."""

    status_code = 401
    kind = "TenantAccessError"


def error_response(exc: BillingError):
    """Flask (body, status) tuple for a BillingError."""
    return exc.to_dict(), exc.status_code
