from __future__ import annotations

import sys

from PySide6 import QtWidgets

from atomik.config import load_settings
from atomik.logging_config import setup_logging
from atomik.views.main_window import AtomikMainWindow


def main() -> None:
    settings = load_settings()
    logger = setup_logging(settings.log_level, settings.log_file)
    if not settings.has_api_key:
        logger.info("No Gemini API key configured; insights will show the offline message.")
    app = QtWidgets.QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setApplicationName("Atomik")
    window = AtomikMainWindow(settings)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
