"""Status log panel"""

from PySide6.QtWidgets import QWidget, QVBoxLayout, QPlainTextEdit, QHBoxLayout, QLabel, QPushButton
from PySide6.QtCore import Slot


class LogPanel(QWidget):
    """Read-only status lines, capped at MAX_LINES."""

    MAX_LINES = 500

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("log_panel")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QHBoxLayout()
        header.setContentsMargins(8, 4, 8, 4)
        header.addWidget(QLabel("Status"))
        header.addStretch()
        btn_clear = QPushButton("Clear")
        btn_clear.setFixedWidth(64)
        btn_clear.clicked.connect(self.clear)
        header.addWidget(btn_clear)
        layout.addLayout(header)

        self._text = QPlainTextEdit()
        self._text.setObjectName("log_text")
        self._text.setReadOnly(True)
        self._text.setMaximumBlockCount(self.MAX_LINES)
        layout.addWidget(self._text)

    @Slot(str)
    def append(self, message: str):
        self._text.appendPlainText(message)

    def clear(self):
        self._text.clear()
