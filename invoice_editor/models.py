"""Invoice data models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date as Date
from decimal import Decimal
from typing import Any, Iterable, Optional, Tuple

from invoice_editor import config
from invoice_editor.formatting import decimal_context, parse_number_or_zero, round2


def compute_line_amount(quantity: Any, rate: Any) -> Decimal:
    """Return ``round2(quantity * rate)``; unparsable inputs count as zero."""
    with decimal_context():
        product = parse_number_or_zero(quantity) * parse_number_or_zero(rate)
    return round2(product)


def compute_grand_total(items: Iterable["InvoiceLineItem"]) -> Decimal:
    with decimal_context():
        total = sum((parse_number_or_zero(item.amount) for item in items), Decimal("0"))
    return round2(total)


@dataclass(frozen=True)
class InvoiceLineItem:
    description: str = ""
    quantity: Decimal = Decimal("1")
    rate: Decimal = Decimal("0")
    amount: Decimal = Decimal("0.00")

    @classmethod
    def create(cls, description: str = "", quantity: Any = 1, rate: Any = 0) -> "InvoiceLineItem":
        """Build an item with its amount derived from ``quantity`` and ``rate``."""
        qty = parse_number_or_zero(quantity)
        unit = parse_number_or_zero(rate)
        return cls(
            description=description or "",
            quantity=qty,
            rate=unit,
            amount=compute_line_amount(qty, unit),
        )


def _blank_items() -> Tuple[InvoiceLineItem, ...]:
    return (InvoiceLineItem.create(),)


@dataclass(frozen=True)
class Invoice:
    id: str
    sender: str = ""
    bill_to: str = ""
    date: Date = field(default_factory=Date.today)
    currency: str = config.DEFAULT_CURRENCY
    items: Tuple[InvoiceLineItem, ...] = field(default_factory=_blank_items)

    @property
    def grand_total(self) -> Decimal:
        return compute_grand_total(self.items)


def new_invoice(sender: str = "", today: Optional[Date] = None) -> Invoice:
    """Start a fresh invoice with one blank line item.

    ``sender`` seeds the from block with the text remembered from the
    previous session.
    """

    return Invoice(
        id=str(uuid.uuid4()),
        sender=sender or "",
        date=today or Date.today(),
    )
