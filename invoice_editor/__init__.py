"""Invoice Editor: invoice model, edit reducer and render projections."""

from invoice_editor.models import Invoice, InvoiceLineItem, new_invoice
from invoice_editor.reducer import InvoiceSession
from invoice_editor.validity import is_exportable

__all__ = ["Invoice", "InvoiceLineItem", "InvoiceSession", "is_exportable", "new_invoice"]
