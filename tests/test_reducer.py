from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Optional

import pytest

from invoice_editor import config
from invoice_editor.data_store import ExcelSettingsStore
from invoice_editor.errors import InvalidFieldError, ItemIndexError, SettingsStoreError
from invoice_editor.models import InvoiceLineItem, new_invoice
from invoice_editor.reducer import (
    InvoiceSession,
    add_item,
    edit_header_field,
    edit_item_field,
    remembered_sender,
    remove_item,
)


class DictStore:
    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self.values = dict(values or {})
        self.writes = []

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.values[key] = value


class BrokenStore:
    def get(self, key: str) -> Optional[str]:
        raise SettingsStoreError("disk gone")

    def set(self, key: str, value: str) -> None:
        raise SettingsStoreError("disk gone")


def test_header_fields_replaced_verbatim():
    invoice = new_invoice()

    invoice = edit_header_field(invoice, "from", "Ana\nBulevar 1")
    invoice = edit_header_field(invoice, "billTo", "  Firma  ")
    invoice = edit_header_field(invoice, "date", "2024-05-01")
    invoice = edit_header_field(invoice, "currency", "EUR")

    assert invoice.sender == "Ana\nBulevar 1"
    assert invoice.bill_to == "  Firma  "
    assert invoice.date == date(2024, 5, 1)
    assert invoice.currency == "EUR"


def test_header_edit_leaves_items_and_id_alone():
    invoice = edit_item_field(new_invoice(), 0, "rate", "10")
    edited = edit_header_field(invoice, "currency", "USD")
    assert edited.items == invoice.items
    assert edited.id == invoice.id


def test_header_edit_accepts_date_objects():
    invoice = edit_header_field(new_invoice(), "date", date(2023, 12, 31))
    assert invoice.date == date(2023, 12, 31)


@pytest.mark.parametrize(
    "field, value",
    [("currency", "GBP"), ("date", "31.12.2023"), ("id", "other"), ("items", ())],
)
def test_header_edit_rejects_bad_input(field, value):
    with pytest.raises(InvalidFieldError):
        edit_header_field(new_invoice(), field, value)


def test_invalid_field_error_is_value_error():
    with pytest.raises(ValueError):
        edit_header_field(new_invoice(), "currency", "JPY")


@pytest.mark.parametrize(
    "field, value, expected",
    [
        ("from", "Ana", "Ana"),
        ("sender", "Ana", "Ana"),
        ("from", "   ", None),
        ("from", "", None),
        ("billTo", "Firma", None),
        ("currency", "EUR", None),
    ],
)
def test_remembered_sender(field, value, expected):
    assert remembered_sender(field, value) == expected


def test_quantity_and_rate_edits_recompute_amount():
    invoice = new_invoice()
    invoice = edit_item_field(invoice, 0, "description", "Consulting")
    invoice = edit_item_field(invoice, 0, "quantity", "10")
    invoice = edit_item_field(invoice, 0, "rate", "50")

    item = invoice.items[0]
    assert item.quantity == Decimal("10")
    assert item.rate == Decimal("50")
    assert str(item.amount) == "500.00"

    invoice = edit_item_field(invoice, 0, "quantity", "2.5")
    assert str(invoice.items[0].amount) == "125.00"


@pytest.mark.parametrize("field", ["quantity", "rate"])
@pytest.mark.parametrize("raw", ["abc", "", "NaN", None, "12,5"])
def test_unparsable_numbers_store_zero(field, raw):
    invoice = edit_item_field(new_invoice(), 0, "rate", "10")
    invoice = edit_item_field(invoice, 0, field, raw)

    assert getattr(invoice.items[0], field) == 0
    assert invoice.items[0].amount == 0


def test_description_stored_verbatim():
    invoice = edit_item_field(new_invoice(), 0, "description", "  Web dizajn  ")
    assert invoice.items[0].description == "  Web dizajn  "


def test_item_edit_does_not_touch_input_or_other_items():
    original = add_item(new_invoice())
    edited = edit_item_field(original, 1, "rate", "5")

    assert original.items[1].rate == 0
    assert edited.items[0] == original.items[0]
    assert str(edited.items[1].amount) == "5.00"


@pytest.mark.parametrize("index", [1, 5, -1])
def test_item_edit_out_of_range_rejected(index):
    invoice = new_invoice()
    with pytest.raises(ItemIndexError):
        edit_item_field(invoice, index, "rate", "10")


def test_item_edit_unknown_field_rejected():
    with pytest.raises(InvalidFieldError):
        edit_item_field(new_invoice(), 0, "amount", "10")


def test_add_item_appends_blank_item():
    invoice = edit_item_field(new_invoice(), 0, "description", "First")
    invoice = add_item(invoice)

    assert len(invoice.items) == 2
    assert invoice.items[0].description == "First"
    assert invoice.items[1] == InvoiceLineItem.create()


@pytest.mark.parametrize("index", [0, 1, -1, 42])
def test_last_item_is_never_removed(index):
    invoice = edit_item_field(new_invoice(), 0, "description", "Only")
    assert remove_item(invoice, index) == invoice


def test_add_then_remove_last_restores_items():
    invoice = edit_item_field(new_invoice(), 0, "description", "Consulting")
    invoice = add_item(invoice)
    invoice = edit_item_field(invoice, 1, "rate", "3")

    restored = remove_item(add_item(invoice), len(invoice.items))
    assert restored.items == invoice.items


def test_remove_keeps_order_of_remaining_items():
    invoice = new_invoice()
    for name in ("a", "b", "c"):
        invoice = add_item(invoice)
        invoice = edit_item_field(invoice, len(invoice.items) - 1, "description", name)

    invoice = remove_item(invoice, 2)
    assert [item.description for item in invoice.items] == ["", "a", "c"]


def test_remove_out_of_range_rejected_when_several_items():
    invoice = add_item(new_invoice())
    with pytest.raises(ItemIndexError):
        remove_item(invoice, 2)


def test_session_seeds_sender_from_store():
    store = DictStore({config.FROM_KEY: "Ana Petrović"})
    session = InvoiceSession.start(store, today=date(2024, 1, 2))

    assert session.invoice.sender == "Ana Petrović"
    assert session.invoice.date == date(2024, 1, 2)


def test_session_writes_non_blank_sender_only():
    store = DictStore()
    session = InvoiceSession.start(store)

    session.edit_header_field("from", "Ana")
    session.edit_header_field("from", "   ")
    session.edit_header_field("billTo", "Firma")

    assert store.writes == [(config.FROM_KEY, "Ana")]
    assert session.invoice.sender == "   "


def test_session_survives_broken_store(caplog):
    session = InvoiceSession.start(BrokenStore())
    assert session.invoice.sender == ""

    session.edit_header_field("from", "Ana")
    assert session.invoice.sender == "Ana"
    assert "Could not remember sender" in caplog.text


def test_session_without_store():
    session = InvoiceSession.start()
    session.edit_header_field("from", "Ana")
    assert session.invoice.sender == "Ana"


def test_sender_remembered_across_sessions(tmp_path):
    store = ExcelSettingsStore(tmp_path / "settings.xlsx")

    first = InvoiceSession.start(store)
    first.edit_header_field("from", "Ana Petrović\nBulevar 1")

    second = InvoiceSession.start(ExcelSettingsStore(tmp_path / "settings.xlsx"))
    assert second.invoice.sender == "Ana Petrović\nBulevar 1"
    assert second.invoice.id != first.invoice.id


def test_session_tracks_gate_and_total():
    session = InvoiceSession.start()
    assert session.exportable is False

    session.edit_header_field("from", "Ana")
    session.edit_header_field("billTo", "Firma")
    session.edit_item_field(0, "description", "Consulting")
    session.edit_item_field(0, "quantity", "10")
    session.edit_item_field(0, "rate", "50")
    session.add_item()
    session.remove_item(1)

    assert session.exportable is True
    assert str(session.grand_total) == "500.00"
    assert session.preview().total == session.export_document().total == "500.00 RSD"


@pytest.mark.parametrize(
    "raw, expected_amount",
    [
        ("1e30", Decimal("3E+30")),
        ("12345678901234567890123456789", Decimal("37037036703703703670370370367")),
    ],
)
def test_large_quantities_are_accepted(raw, expected_amount):
    invoice = edit_item_field(new_invoice(), 0, "rate", "3")
    invoice = edit_item_field(invoice, 0, "quantity", raw)

    assert invoice.items[0].quantity == Decimal(raw)
    assert invoice.items[0].amount == expected_amount
    assert invoice.grand_total == expected_amount


def test_grand_total_of_several_large_lines():
    invoice = edit_item_field(new_invoice(), 0, "quantity", "9.99e25")
    invoice = edit_item_field(invoice, 0, "rate", "1")
    invoice = add_item(invoice)
    invoice = edit_item_field(invoice, 1, "quantity", "9.99e25")
    invoice = edit_item_field(invoice, 1, "rate", "1")

    assert invoice.grand_total == Decimal("1.998E+26")
