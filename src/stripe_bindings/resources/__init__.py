"""
Typed records and CRUD operations for API resources.
"""

from .invoiceitem import (
    CreateInvoiceItem,
    InvoiceItem,
    ListInvoiceItems,
    UpdateInvoiceItem,
)
from .related import Customer, Invoice, Period, Plan, Subscription, TaxRate

__all__ = [
    "CreateInvoiceItem",
    "Customer",
    "Invoice",
    "InvoiceItem",
    "ListInvoiceItems",
    "Period",
    "Plan",
    "Subscription",
    "TaxRate",
    "UpdateInvoiceItem",
]
