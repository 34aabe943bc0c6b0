"""Preview and export projections of an invoice.

Both projections take their strings from :mod:`invoice_editor.formatting`
and :mod:`invoice_editor.config`, so the on-screen preview and the
exported document always show the same numbers and labels. They differ
only in layout: the export projection wraps long text to fixed column
widths for the paginated document.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import List, Tuple

from invoice_editor import config
from invoice_editor.formatting import format_amount, format_quantity
from invoice_editor.models import Invoice


@dataclass(frozen=True)
class PreviewRow:
    description: str
    quantity: str
    rate: str
    amount: str


@dataclass(frozen=True)
class PreviewView:
    title: str
    number_line: str
    date_line: str
    from_label: str
    from_text: str
    bill_to_label: str
    bill_to_text: str
    column_headers: Tuple[str, ...]
    rows: Tuple[PreviewRow, ...]
    total: str
    total_line: str
    footer: str


@dataclass(frozen=True)
class ExportRow:
    description_lines: Tuple[str, ...]
    quantity: str
    rate: str
    amount: str


@dataclass(frozen=True)
class ExportDocument:
    title: str
    number_line: str
    date_line: str
    from_label: str
    from_lines: Tuple[str, ...]
    bill_to_label: str
    bill_to_lines: Tuple[str, ...]
    column_headers: Tuple[str, ...]
    rows: Tuple[ExportRow, ...]
    total: str
    total_line: str
    footer: str
    filename: str


def export_filename(invoice: Invoice) -> str:
    return f"invoice-{invoice.id}.{config.EXPORT_EXTENSION}"


def _number_line(invoice: Invoice) -> str:
    return f"{config.NUMBER_LABEL}: {invoice.id}"


def _date_line(invoice: Invoice) -> str:
    return f"{config.DATE_LABEL}: {invoice.date.isoformat()}"


def _total(invoice: Invoice) -> str:
    return format_amount(invoice.grand_total, invoice.currency)


def _total_line(total: str) -> str:
    return f"{config.TOTAL_LABEL}: {total}"


def _wrap(text: str, width: int) -> Tuple[str, ...]:
    """Wrap each paragraph of ``text``; blank paragraphs stay as blank lines."""
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        lines.extend(textwrap.wrap(paragraph, width=width) or [""])
    return tuple(lines)


def build_preview(invoice: Invoice) -> PreviewView:
    """Project ``invoice`` into the structure shown in the live preview."""
    rows = tuple(
        PreviewRow(
            description=item.description,
            quantity=format_quantity(item.quantity),
            rate=format_amount(item.rate, invoice.currency),
            amount=format_amount(item.amount, invoice.currency),
        )
        for item in invoice.items
    )
    total = _total(invoice)
    return PreviewView(
        title=config.TITLE,
        number_line=_number_line(invoice),
        date_line=_date_line(invoice),
        from_label=config.FROM_LABEL,
        from_text=invoice.sender,
        bill_to_label=config.BILL_TO_LABEL,
        bill_to_text=invoice.bill_to,
        column_headers=config.COLUMN_HEADERS,
        rows=rows,
        total=total,
        total_line=_total_line(total),
        footer=config.FOOTER,
    )


def build_export_document(invoice: Invoice) -> ExportDocument:
    """Project ``invoice`` into the content of the downloadable document."""
    rows = tuple(
        ExportRow(
            description_lines=_wrap(item.description, config.DESCRIPTION_WRAP_WIDTH),
            quantity=format_quantity(item.quantity),
            rate=format_amount(item.rate, invoice.currency),
            amount=format_amount(item.amount, invoice.currency),
        )
        for item in invoice.items
    )
    total = _total(invoice)
    return ExportDocument(
        title=config.TITLE,
        number_line=_number_line(invoice),
        date_line=_date_line(invoice),
        from_label=config.FROM_LABEL,
        from_lines=_wrap(invoice.sender, config.BLOCK_WRAP_WIDTH),
        bill_to_label=config.BILL_TO_LABEL,
        bill_to_lines=_wrap(invoice.bill_to, config.BLOCK_WRAP_WIDTH),
        column_headers=config.COLUMN_HEADERS,
        rows=rows,
        total=total,
        total_line=_total_line(total),
        footer=config.FOOTER,
        filename=export_filename(invoice),
    )
