"""Settings group: output folder + worker count, saved straight to AppSettings"""

from PySide6.QtWidgets import (
    QGroupBox, QFormLayout, QWidget, QHBoxLayout, QLineEdit, QPushButton,
    QSpinBox, QFileDialog,
)
from PySide6.QtCore import Signal

from desktop.app.config.settings import AppSettings


class SettingsPanel(QGroupBox):
    """Changes take effect from the next batch."""

    settings_changed = Signal()

    def __init__(self, settings: AppSettings, parent=None):
        super().__init__("Settings", parent)
        self._settings = settings

        form = QFormLayout(self)

        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        self._edit_output = QLineEdit(self._settings.output_dir)
        self._edit_output.setPlaceholderText("~/Downloads")
        self._edit_output.editingFinished.connect(self._save_output_dir)
        row_layout.addWidget(self._edit_output, 1)
        self._btn_browse = QPushButton("Browse…")
        self._btn_browse.setFixedWidth(72)
        self._btn_browse.clicked.connect(self._browse)
        row_layout.addWidget(self._btn_browse)
        form.addRow("Output folder:", row)

        self._spin_workers = QSpinBox()
        self._spin_workers.setRange(1, 8)
        self._spin_workers.setValue(self._settings.worker_count)
        self._spin_workers.valueChanged.connect(self._save_workers)
        form.addRow("Workers:", self._spin_workers)

    def set_locked(self, locked: bool):
        self._edit_output.setEnabled(not locked)
        self._btn_browse.setEnabled(not locked)
        self._spin_workers.setEnabled(not locked)

    def _browse(self):
        p = QFileDialog.getExistingDirectory(self, "Select Output Folder", self._edit_output.text())
        if p:
            self._edit_output.setText(p)
            self._save_output_dir()

    def _save_output_dir(self):
        self._settings.output_dir = self._edit_output.text().strip()
        self.settings_changed.emit()

    def _save_workers(self, val: int):
        self._settings.worker_count = val
        self.settings_changed.emit()
