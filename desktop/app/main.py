"""Entry point: python3 -m desktop.app.main"""

import sys

from PySide6.QtWidgets import QApplication

from fileconv.logging_utils import get_logger
from desktop.app.config import AppSettings, STYLESHEET
from desktop.app.ui import MainWindow


def main():
    app = QApplication(sys.argv)
    app.setApplicationName("File Converter")
    app.setOrganizationName("file-converter")
    app.setStyleSheet(STYLESHEET)

    get_logger().info("File Converter started")
    settings = AppSettings()
    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
