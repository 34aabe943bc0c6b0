"""Entry point for the Invoice Editor desktop app."""

import logging
import sys

from PyQt5.QtWidgets import QApplication

from invoice_editor.data_store import ExcelSettingsStore
from invoice_editor.ui_main import MainWindow


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("PyQt5").setLevel(logging.WARNING)


def main() -> None:
    _configure_logging()
    app = QApplication(sys.argv)
    window = MainWindow(store=ExcelSettingsStore())
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
