"""Exceptions raised by the invoice core and its collaborators."""


class InvoiceEditorError(Exception):
    """Base class for all invoice editor errors."""


class InvalidFieldError(InvoiceEditorError, ValueError):
    """Unknown field name or a value the field cannot hold."""


class ItemIndexError(InvoiceEditorError, IndexError):
    """Line item index outside the current item sequence."""


class SettingsStoreError(InvoiceEditorError):
    """The settings workbook could not be read or written."""


class ExportError(InvoiceEditorError):
    """The export document could not be produced."""
