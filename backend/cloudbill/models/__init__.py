from .tenancy import Organization
from .customers import Customer
from .inventory import Product
from .invoices import Invoice, InvoiceLine, PAYMENT_METHODS, PAYMENT_STATUSES

__all__ = [
    'Organization',
    'Customer',
    'Product',
    'Invoice', 'InvoiceLine', 'PAYMENT_METHODS', 'PAYMENT_STATUSES',
]
