"""Excel-backed key/value store for settings remembered between sessions."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from invoice_editor import config
from invoice_editor.errors import SettingsStoreError


REQUIRED_COLUMNS = ["Key", "Value"]

_LOAD_ERRORS = (OSError, BadZipFile, InvalidFileException, KeyError, ValueError)


class SettingsStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class ExcelSettingsStore:
    """Reads and writes ``Key``/``Value`` rows in an Excel sheet.

    The workbook is opened on every call so that a value written by one
    session is visible to the next one. A missing file simply holds no
    values; it is created on the first :meth:`set`.
    """

    def __init__(self, path: Path | str | None = None, sheet_name: str | None = None) -> None:
        self.path: Path = Path(path) if path else config.SETTINGS_PATH
        self.sheet_name = sheet_name or config.SETTINGS_SHEET_NAME

    def _open(self):
        try:
            return load_workbook(self.path)
        except _LOAD_ERRORS as exc:
            raise SettingsStoreError(f"Cannot read settings file {self.path}: {exc}") from exc

    def _new_workbook(self) -> Workbook:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.sheet_name
        sheet.append(REQUIRED_COLUMNS)
        return workbook

    def _sheet(self, workbook) -> Worksheet:
        if self.sheet_name not in workbook.sheetnames:
            sheet = workbook.create_sheet(self.sheet_name)
            sheet.append(REQUIRED_COLUMNS)
            return sheet
        return workbook[self.sheet_name]

    def _detect_columns(self, sheet: Worksheet) -> Dict[str, int]:
        headers: Dict[str, int] = {}
        for idx, cell in enumerate(sheet[1], start=1):
            if cell.value is not None:
                headers[str(cell.value).strip()] = idx

        missing = [col for col in REQUIRED_COLUMNS if col not in headers]
        if missing:
            raise SettingsStoreError(
                f"Sheet '{self.sheet_name}' is missing columns: {', '.join(missing)}"
            )
        return headers

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None if the key was never written."""
        if not self.path.exists():
            return None

        workbook = self._open()
        if self.sheet_name not in workbook.sheetnames:
            return None
        sheet = workbook[self.sheet_name]
        col_map = self._detect_columns(sheet)

        for row in sheet.iter_rows(min_row=2):
            if row[col_map["Key"] - 1].value == key:
                value = row[col_map["Value"] - 1].value
                return None if value is None else str(value)
        return None

    def set(self, key: str, value: str) -> None:
        """Overwrite ``key`` with ``value`` and save the workbook."""
        workbook = self._open() if self.path.exists() else self._new_workbook()
        sheet = self._sheet(workbook)
        col_map = self._detect_columns(sheet)

        try:
            for row in sheet.iter_rows(min_row=2):
                if row[col_map["Key"] - 1].value == key:
                    row[col_map["Value"] - 1].value = value
                    break
            else:
                new_row = [None] * max(col_map.values())
                new_row[col_map["Key"] - 1] = key
                new_row[col_map["Value"] - 1] = value
                sheet.append(new_row)

            self.path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(self.path)
        except (OSError, IllegalCharacterError) as exc:
            raise SettingsStoreError(f"Cannot write settings file {self.path}: {exc}") from exc
