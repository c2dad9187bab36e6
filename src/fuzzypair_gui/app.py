"""Point d'entrée de l'application GUI FuzzyPair."""

from __future__ import annotations

import logging
import sys

# Import pandas avant PySide6 pour éviter le conflit shiboken/six
# (AttributeError: '_SixMetaPathImporter' object has no attribute '_path')
import pandas  # noqa: F401

from PySide6.QtWidgets import QApplication

from fuzzypair_gui.main_window import MainWindow


def main() -> int:
    """Lance l'application GUI."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    app.setApplicationName("FuzzyPair")
    app.setOrganizationName("FuzzyPair")
    win = MainWindow()
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
