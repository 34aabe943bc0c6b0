"""Invoice export to PDF via QTextDocument and a PDF-format QPrinter."""

from __future__ import annotations

import logging
import os
import tempfile
from html import escape
from pathlib import Path
from typing import Iterable, List

from PyQt5.QtGui import QTextDocument
from PyQt5.QtPrintSupport import QPrinter

from invoice_editor.errors import ExportError
from invoice_editor.models import Invoice
from invoice_editor.projection import ExportDocument, build_export_document

logger = logging.getLogger(__name__)


def _lines(lines: Iterable[str]) -> str:
    return "<br/>".join(escape(line) for line in lines)


class PdfExporter:
    """Render invoices as HTML and print them into PDF files.

    A running ``QApplication`` is required.
    """

    def __init__(self, output_dir: Path | str | None = None) -> None:
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()

    def build_html(self, document: ExportDocument) -> str:
        headers = "".join(
            f"<th align='{align}'>{escape(text)}</th>"
            for text, align in zip(document.column_headers, ("left", "center", "right", "right"))
        )
        rows: List[str] = []
        for index, row in enumerate(document.rows):
            background = "#f5f7fa" if index % 2 == 0 else "#ffffff"
            rows.append(
                f"<tr style='background-color:{background};'>"
                f"<td>{_lines(row.description_lines)}</td>"
                f"<td align='center'>{escape(row.quantity)}</td>"
                f"<td align='right'>{escape(row.rate)}</td>"
                f"<td align='right'>{escape(row.amount)}</td></tr>"
            )

        return f"""
        <html>
        <head>
            <style>
                body {{ font-family: 'Arial'; font-size: 10pt; color: #2c3e50; }}
                h1 {{ text-align: center; font-size: 20pt; }}
                h3 {{ color: #34495e; margin: 0 0 4px 0; }}
                table.items {{ width: 100%; border-collapse: collapse; }}
                table.items th {{ background-color: #34495e; color: #ffffff; padding: 4px; }}
                table.items td {{ padding: 4px; vertical-align: top; }}
                .total {{ background-color: #34495e; color: #ffffff; padding: 6px; }}
                .footer {{ text-align: center; color: #808080; font-size: 8pt; }}
            </style>
        </head>
        <body>
            <h1>{escape(document.title)}</h1>
            <p>{escape(document.number_line)}<br/>{escape(document.date_line)}</p>
            <table width='100%'>
                <tr>
                    <td width='50%' valign='top'><h3>{escape(document.from_label)}:</h3>{_lines(document.from_lines)}</td>
                    <td width='50%' valign='top'><h3>{escape(document.bill_to_label)}:</h3>{_lines(document.bill_to_lines)}</td>
                </tr>
            </table>
            <br/>
            <table class='items' width='100%'>
                <tr>{headers}</tr>
                {''.join(rows)}
            </table>
            <br/>
            <table width='100%'>
                <tr><td></td><td align='right' class='total'><b>{escape(document.total_line)}</b></td></tr>
            </table>
            <p class='footer'>{escape(document.footer)}</p>
        </body>
        </html>
        """

    def _print(self, document: ExportDocument, target: Path) -> None:
        printer = QPrinter(QPrinter.HighResolution)
        printer.setOutputFileName(str(target))
        printer.setOutputFormat(QPrinter.PdfFormat)
        printer.setPageSize(QPrinter.A4)
        if not printer.isValid():
            raise ExportError("PDF printer not available.")

        doc = QTextDocument()
        doc.setHtml(self.build_html(document))
        doc.print_(printer)

        if not target.exists() or target.stat().st_size == 0:
            raise ExportError(f"Nothing was written to {target}.")

    def export(self, invoice: Invoice, path: Path | str | None = None) -> Path:
        """Write ``invoice`` to a PDF and return its path.

        The file is printed next to its destination under a temporary name
        and moved into place only once complete, so a failed export leaves
        nothing behind.
        """

        document = build_export_document(invoice)
        destination = Path(path) if path else self.output_dir / document.filename

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".invoice-", suffix=".part.pdf", dir=destination.parent)
            os.close(fd)
        except OSError as exc:
            raise ExportError(f"Cannot write to {destination.parent}: {exc}") from exc

        tmp_path = Path(tmp_name)
        try:
            self._print(document, tmp_path)
            os.replace(tmp_path, destination)
        except ExportError:
            self._discard(tmp_path)
            logger.exception("Export of invoice %s failed", invoice.id)
            raise
        except OSError as exc:
            self._discard(tmp_path)
            logger.exception("Export of invoice %s failed", invoice.id)
            raise ExportError(f"Cannot write {destination}: {exc}") from exc

        logger.info("Exported invoice %s to %s", invoice.id, destination)
        return destination

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
