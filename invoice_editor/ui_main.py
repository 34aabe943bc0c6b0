"""PyQt5 UI for the Invoice Editor."""

from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QDate, Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QComboBox,
    QDateEdit,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from invoice_editor import config
from invoice_editor.data_store import ExcelSettingsStore, SettingsStore
from invoice_editor.errors import ExportError
from invoice_editor.formatting import format_amount, format_quantity
from invoice_editor.printing.pdf_exporter import PdfExporter
from invoice_editor.projection import PreviewView, export_filename
from invoice_editor.reducer import InvoiceSession

# Table column -> line item field; the amount column is read-only.
ITEM_COLUMNS = {0: "description", 1: "quantity", 2: "rate"}
AMOUNT_COLUMN = 3


def build_preview_html(view: PreviewView) -> str:
    rows = []
    for index, row in enumerate(view.rows):
        background = "#f5f7fa" if index % 2 == 0 else "#ffffff"
        rows.append(
            f"<tr style='background-color:{background};'>"
            f"<td>{escape(row.description)}</td>"
            f"<td align='center'>{escape(row.quantity)}</td>"
            f"<td align='right'>{escape(row.rate)}</td>"
            f"<td align='right'>{escape(row.amount)}</td></tr>"
        )
    headers = "".join(
        f"<th align='{align}'>{escape(text)}</th>"
        for text, align in zip(view.column_headers, ("left", "center", "right", "right"))
    )
    from_html = escape(view.from_text).replace("\n", "<br/>")
    bill_to_html = escape(view.bill_to_text).replace("\n", "<br/>")

    return f"""
    <html>
    <head>
        <style>
            body {{ font-family: Arial; font-size: 10pt; color: #2c3e50; }}
            h2 {{ text-align: center; margin: 0 0 8px 0; }}
            h4 {{ color: #34495e; margin: 0 0 4px 0; }}
            table {{ width: 100%; border-collapse: collapse; }}
            th {{ background-color: #34495e; color: #ffffff; padding: 4px; }}
            td {{ padding: 4px; }}
        </style>
    </head>
    <body>
        <h2>{escape(view.title)}</h2>
        <p>{escape(view.number_line)}<br/>{escape(view.date_line)}</p>
        <table>
            <tr>
                <td valign='top'><h4>{escape(view.from_label)}:</h4>{from_html}</td>
                <td valign='top'><h4>{escape(view.bill_to_label)}:</h4>{bill_to_html}</td>
            </tr>
        </table>
        <br/>
        <table>
            <tr>{headers}</tr>
            {''.join(rows)}
        </table>
        <p align='right'><b>{escape(view.total_line)}</b></p>
        <p align='center' style='color:#808080;font-size:8pt;'>{escape(view.footer)}</p>
    </body>
    </html>
    """


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, store: Optional[SettingsStore] = None) -> None:
        super().__init__()
        self.setWindowTitle(config.WINDOW_TITLE)
        self.resize(1200, 700)

        self.session = InvoiceSession.start(store if store is not None else ExcelSettingsStore())
        self.exporter = PdfExporter()

        self._build_ui()
        self._populate_header()
        self._refresh()

    def _build_ui(self) -> None:
        root = QWidget()
        main_layout = QHBoxLayout()
        main_layout.addLayout(self._build_form_panel(), 1)
        main_layout.addLayout(self._build_preview_panel(), 1)
        root.setLayout(main_layout)
        self.setCentralWidget(root)

    def _build_form_panel(self) -> QVBoxLayout:
        layout = QVBoxLayout()

        header = QFormLayout()
        self.number_input = QLineEdit()
        self.number_input.setReadOnly(True)
        self.date_input = QDateEdit()
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("yyyy-MM-dd")
        self.date_input.dateChanged.connect(self._on_date_changed)
        self.from_input = QPlainTextEdit()
        self.from_input.textChanged.connect(
            lambda: self._on_header_changed("from", self.from_input.toPlainText())
        )
        self.bill_to_input = QPlainTextEdit()
        self.bill_to_input.textChanged.connect(
            lambda: self._on_header_changed("billTo", self.bill_to_input.toPlainText())
        )
        self.currency_input = QComboBox()
        self.currency_input.addItems(list(config.CURRENCIES))
        self.currency_input.currentTextChanged.connect(
            lambda text: self._on_header_changed("currency", text)
        )
        header.addRow(config.NUMBER_LABEL, self.number_input)
        header.addRow(config.DATE_LABEL, self.date_input)
        header.addRow(config.FROM_LABEL, self.from_input)
        header.addRow(config.BILL_TO_LABEL, self.bill_to_input)
        header.addRow("Currency", self.currency_input)
        layout.addLayout(header)

        layout.addWidget(QLabel("Stavke"))
        self.table = QTableWidget(0, len(config.COLUMN_HEADERS))
        self.table.setHorizontalHeaderLabels(list(config.COLUMN_HEADERS))
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.table, 1)

        buttons = QHBoxLayout()
        self.add_button = QPushButton("Dodaj stavku")
        self.add_button.clicked.connect(self._add_item)
        self.remove_button = QPushButton("Ukloni stavku")
        self.remove_button.clicked.connect(self._remove_item)
        buttons.addWidget(self.add_button)
        buttons.addWidget(self.remove_button)
        buttons.addStretch()
        layout.addLayout(buttons)

        self.total_label = QLabel()
        total_font = QFont()
        total_font.setPointSize(16)
        total_font.setBold(True)
        self.total_label.setFont(total_font)
        self.total_label.setAlignment(Qt.AlignRight)
        layout.addWidget(self.total_label)

        self.download_button = QPushButton("Download Invoice")
        self.download_button.clicked.connect(self._on_download)
        layout.addWidget(self.download_button)
        return layout

    def _build_preview_panel(self) -> QVBoxLayout:
        layout = QVBoxLayout()
        layout.addWidget(QLabel("Preview"))
        self.preview = QTextBrowser()
        layout.addWidget(self.preview, 1)
        return layout

    def _populate_header(self) -> None:
        invoice = self.session.invoice
        widgets = (self.date_input, self.from_input, self.bill_to_input, self.currency_input)
        for widget in widgets:
            widget.blockSignals(True)
        self.number_input.setText(invoice.id)
        self.date_input.setDate(QDate(invoice.date.year, invoice.date.month, invoice.date.day))
        self.from_input.setPlainText(invoice.sender)
        self.bill_to_input.setPlainText(invoice.bill_to)
        self.currency_input.setCurrentText(invoice.currency)
        for widget in widgets:
            widget.blockSignals(False)

    def _on_header_changed(self, field: str, value: str) -> None:
        self.session.edit_header_field(field, value)
        self._refresh()

    def _on_date_changed(self, value: QDate) -> None:
        self.session.edit_header_field("date", value.toPyDate())
        self._refresh()

    def _on_item_changed(self, cell: QTableWidgetItem) -> None:
        field = ITEM_COLUMNS.get(cell.column())
        if field is None:
            return
        self.session.edit_item_field(cell.row(), field, cell.text())
        self._refresh()

    def _add_item(self) -> None:
        self.session.add_item()
        self._refresh()

    def _remove_item(self) -> None:
        row = self.table.currentRow()
        if row < 0:
            row = self.table.rowCount() - 1
        self.session.remove_item(row)
        self._refresh()

    def _refresh_table(self) -> None:
        items = self.session.invoice.items
        self.table.blockSignals(True)
        self.table.setRowCount(len(items))
        for row, item in enumerate(items):
            values = [
                item.description,
                format_quantity(item.quantity),
                format_quantity(item.rate),
                f"{item.amount:.2f}",
            ]
            for col, val in enumerate(values):
                # cells are updated in place; the edited one may be mid-signal
                cell = self.table.item(row, col)
                if cell is None:
                    cell = QTableWidgetItem()
                    if col == AMOUNT_COLUMN:
                        cell.setFlags(cell.flags() & ~Qt.ItemIsEditable)
                    self.table.setItem(row, col, cell)
                cell.setText(val)
        self.table.blockSignals(False)

    def _refresh(self) -> None:
        invoice = self.session.invoice
        self._refresh_table()
        self.total_label.setText(f"Total: {format_amount(invoice.grand_total, invoice.currency)}")
        self.remove_button.setEnabled(len(invoice.items) > 1)
        self.download_button.setEnabled(self.session.exportable)
        self.preview.setHtml(build_preview_html(self.session.preview()))

    def _on_download(self) -> None:
        invoice = self.session.invoice
        suggested = str(Path.cwd() / export_filename(invoice))
        path, _ = QFileDialog.getSaveFileName(self, "Save invoice", suggested, "PDF (*.pdf)")
        if not path:
            return

        try:
            saved = self.exporter.export(invoice, path)
        except ExportError as exc:
            QMessageBox.critical(self, "Export Error", f"Failed to export invoice: {exc}")
            return

        QMessageBox.information(self, "Saved", f"Invoice saved to {saved}.")


if __name__ == "__main__":
    app = QApplication([])
    window = MainWindow()
    window.show()
    app.exec_()
