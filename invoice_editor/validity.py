"""Export gating for invoices."""

from __future__ import annotations

from invoice_editor.models import Invoice, InvoiceLineItem


def _filled(text: str) -> bool:
    return bool(text and text.strip())


def _is_billable(item: InvoiceLineItem) -> bool:
    return _filled(item.description) and item.amount > 0


def is_exportable(invoice: Invoice) -> bool:
    """Return True when sender, recipient and one billable item are present.

    Whitespace-only text counts as empty.
    """

    return (
        _filled(invoice.sender)
        and _filled(invoice.bill_to)
        and any(_is_billable(item) for item in invoice.items)
    )
