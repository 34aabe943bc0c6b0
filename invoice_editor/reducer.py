"""Field edits applied to an invoice, and the session that owns it."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date as Date
from decimal import Decimal
from typing import Any, Optional

from invoice_editor import config
from invoice_editor.data_store import SettingsStore
from invoice_editor.errors import InvalidFieldError, ItemIndexError, SettingsStoreError
from invoice_editor.models import Invoice, InvoiceLineItem, compute_line_amount, new_invoice
from invoice_editor.formatting import parse_number_or_zero
from invoice_editor.projection import ExportDocument, PreviewView, build_export_document, build_preview
from invoice_editor.validity import is_exportable

logger = logging.getLogger(__name__)

# Form field names mapped onto Invoice attributes.
HEADER_FIELDS = {
    "from": "sender",
    "sender": "sender",
    "billTo": "bill_to",
    "bill_to": "bill_to",
    "date": "date",
    "currency": "currency",
}

ITEM_FIELDS = ("description", "quantity", "rate")


def _coerce_date(value: Any) -> Date:
    if isinstance(value, Date):
        return value
    try:
        return Date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidFieldError(f"Invalid date: {value!r}") from exc


def edit_header_field(invoice: Invoice, field: str, value: Any) -> Invoice:
    """Return a copy of ``invoice`` with one header field replaced."""
    attr = HEADER_FIELDS.get(field)
    if attr is None:
        raise InvalidFieldError(f"Unknown header field: {field!r}")

    if attr == "date":
        value = _coerce_date(value)
    elif attr == "currency":
        if value not in config.CURRENCIES:
            raise InvalidFieldError(f"Unsupported currency: {value!r}")
    else:
        value = "" if value is None else str(value)

    return replace(invoice, **{attr: value})


def remembered_sender(field: str, value: Any) -> Optional[str]:
    """Return the sender text to persist for this edit, if any."""
    if HEADER_FIELDS.get(field) != "sender" or value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _check_index(invoice: Invoice, index: int) -> None:
    if not 0 <= index < len(invoice.items):
        raise ItemIndexError(
            f"Item index {index} out of range for {len(invoice.items)} item(s)."
        )


def edit_item_field(invoice: Invoice, index: int, field: str, raw_value: Any) -> Invoice:
    """Return a copy of ``invoice`` with one line item field replaced.

    Quantity and rate go through :func:`parse_number_or_zero` and the line
    amount is recomputed; the description is stored as typed.
    """

    _check_index(invoice, index)
    if field not in ITEM_FIELDS:
        raise InvalidFieldError(f"Unknown item field: {field!r}")

    item = invoice.items[index]
    if field == "description":
        updated = replace(item, description="" if raw_value is None else str(raw_value))
    else:
        number = parse_number_or_zero(raw_value)
        updated = replace(item, **{field: number})
        updated = replace(updated, amount=compute_line_amount(updated.quantity, updated.rate))

    items = invoice.items[:index] + (updated,) + invoice.items[index + 1:]
    return replace(invoice, items=items)


def add_item(invoice: Invoice) -> Invoice:
    return replace(invoice, items=invoice.items + (InvoiceLineItem.create(),))


def remove_item(invoice: Invoice, index: int) -> Invoice:
    """Drop the item at ``index``; the last remaining item is never removed."""
    if len(invoice.items) <= 1:
        return invoice
    _check_index(invoice, index)
    return replace(invoice, items=invoice.items[:index] + invoice.items[index + 1:])


class InvoiceSession:
    """Owns the invoice being edited and the remembered sender text."""

    def __init__(self, invoice: Invoice, store: Optional[SettingsStore] = None) -> None:
        self.invoice = invoice
        self.store = store

    @classmethod
    def start(cls, store: Optional[SettingsStore] = None, today: Optional[Date] = None) -> "InvoiceSession":
        """Create a session with a fresh invoice seeded from ``store``."""
        sender = ""
        if store is not None:
            try:
                sender = store.get(config.FROM_KEY) or ""
            except SettingsStoreError as exc:
                logger.warning("Remembered sender unavailable: %s", exc)

        invoice = new_invoice(sender=sender, today=today)
        logger.info("Started invoice %s", invoice.id)
        return cls(invoice, store)

    def _remember(self, value: str) -> None:
        if self.store is None:
            return
        try:
            self.store.set(config.FROM_KEY, value)
        except SettingsStoreError as exc:
            logger.warning("Could not remember sender: %s", exc)

    def edit_header_field(self, field: str, value: Any) -> Invoice:
        self.invoice = edit_header_field(self.invoice, field, value)
        remembered = remembered_sender(field, value)
        if remembered is not None:
            self._remember(remembered)
        return self.invoice

    def edit_item_field(self, index: int, field: str, raw_value: Any) -> Invoice:
        self.invoice = edit_item_field(self.invoice, index, field, raw_value)
        return self.invoice

    def add_item(self) -> Invoice:
        self.invoice = add_item(self.invoice)
        return self.invoice

    def remove_item(self, index: int) -> Invoice:
        self.invoice = remove_item(self.invoice, index)
        return self.invoice

    @property
    def grand_total(self) -> Decimal:
        return self.invoice.grand_total

    @property
    def exportable(self) -> bool:
        return is_exportable(self.invoice)

    def preview(self) -> PreviewView:
        return build_preview(self.invoice)

    def export_document(self) -> ExportDocument:
        return build_export_document(self.invoice)
