"""Configuration constants for the Invoice Editor."""

from pathlib import Path
from typing import Tuple

# Workbook that remembers the sender between sessions.
SETTINGS_PATH: Path = Path("data/settings.xlsx")

# Sheet name inside the settings workbook.
SETTINGS_SHEET_NAME: str = "Settings"

# Key under which the last used sender text is stored.
FROM_KEY: str = "invoiceFrom"

CURRENCIES: Tuple[str, ...] = ("RSD", "EUR", "USD")
DEFAULT_CURRENCY: str = "RSD"

# Characters per line when wrapping text in the exported document.
DESCRIPTION_WRAP_WIDTH: int = 40
BLOCK_WRAP_WIDTH: int = 45

EXPORT_EXTENSION: str = "pdf"

WINDOW_TITLE: str = "Invoice Generator"

# Display strings shared by the preview and the exported document.
TITLE: str = "FAKTURA"
NUMBER_LABEL: str = "Broj fakture"
DATE_LABEL: str = "Datum"
FROM_LABEL: str = "Pošaljilac"
BILL_TO_LABEL: str = "Primalac"
COLUMN_HEADERS: Tuple[str, str, str, str] = ("Opis", "Količina", "Cena", "Iznos")
TOTAL_LABEL: str = "Ukupno"
FOOTER: str = "Hvala vam na poslovanju!"
