"""Main window: options + file list on the left, status log and progress on the right"""

from pathlib import Path

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QGroupBox,
    QCheckBox, QProgressBar, QMessageBox, QStatusBar,
)

from fileconv.api import BatchInput, ProgressEvent, TaskState
from fileconv.errors import BatchInProgressError, NoFilesSelectedError
from fileconv.runner import Batch, BatchState

from desktop.app.config.settings import AppSettings
from desktop.app.core.adapter import conversion_kind
from desktop.app.runner.worker import ConversionWorker
from desktop.app.ui.widgets import FileListPicker, LogPanel, SettingsPanel, TaskControls


class MainWindow(QMainWindow):
    def __init__(self, settings: AppSettings, parent=None):
        super().__init__(parent)
        self._settings = settings
        self._worker = ConversionWorker(settings, self)
        self._finished_tasks = 0
        self.setWindowTitle("File Converter")
        self.setMinimumSize(800, 600)
        self._setup_ui()
        self._connect_signals()
        self._restore_geometry()

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(10, 10, 10, 10)

        # Left: options + selected files
        left = QVBoxLayout()
        options = QGroupBox("Options")
        opt_layout = QVBoxLayout(options)
        self._chk_pdf = QCheckBox("PDF to DOCX")
        self._chk_resize = QCheckBox("Resize Image")
        opt_layout.addWidget(self._chk_pdf)
        opt_layout.addWidget(self._chk_resize)
        left.addWidget(options)

        self._settings_panel = SettingsPanel(self._settings)
        left.addWidget(self._settings_panel)

        files = QGroupBox("Files")
        files_layout = QVBoxLayout(files)
        self._picker = FileListPicker(start_dir=self._settings.last_input_dir)
        files_layout.addWidget(self._picker)
        left.addWidget(files, 1)

        self._controls = TaskControls()
        left.addWidget(self._controls)
        root.addLayout(left, 1)

        # Right: status lines + overall progress
        right = QVBoxLayout()
        self._log_panel = LogPanel()
        right.addWidget(self._log_panel, 1)
        self._progress = QProgressBar()
        self._progress.setValue(0)
        right.addWidget(self._progress)
        root.addLayout(right, 2)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready")

    def _connect_signals(self):
        self._picker.files_selected.connect(self._on_files_selected)
        self._controls.start_clicked.connect(self._on_start)
        self._controls.cancel_clicked.connect(self._on_cancel)
        self._settings_panel.settings_changed.connect(self._on_settings_changed)
        self._worker.event_received.connect(self._on_event)
        self._worker.batch_started.connect(self._on_batch_started)
        self._worker.batch_finished.connect(self._on_batch_finished)

    # ---- handlers ----

    def _on_files_selected(self, files: list):
        self._settings.last_input_dir = self._picker.start_dir
        self._log_panel.append("Selected files:")
        for f in files:
            self._log_panel.append(f" - {Path(f).name}")

    def _on_settings_changed(self):
        self._status_bar.showMessage("Settings saved; applied to the next batch")

    def _on_start(self):
        kind = conversion_kind(self._chk_pdf.isChecked(), self._chk_resize.isChecked())
        try:
            self._worker.start(BatchInput.of(self._picker.files(), kind))
        except NoFilesSelectedError as e:
            QMessageBox.critical(self, "Error", e.message)
        except BatchInProgressError as e:
            self._log_panel.append(e.message)

    def _on_cancel(self):
        if self._worker.cancel():
            self._status_bar.showMessage("Cancelling…")

    def _on_batch_started(self, batch: Batch):
        self._finished_tasks = 0
        self._progress.setMaximum(batch.total_count)
        self._progress.setValue(0)
        self._controls.set_running(True)
        self._settings_panel.set_locked(True)
        self._status_bar.showMessage(f"Running: {batch.kind.label}")

    def _on_event(self, event: ProgressEvent):
        self._log_panel.append(event.message)
        if event.task_id and event.state in (TaskState.COMPLETED, TaskState.FAILED):
            self._finished_tasks += 1
            self._progress.setValue(self._finished_tasks)

    def _on_batch_finished(self, batch: Batch):
        self._controls.set_running(False)
        self._settings_panel.set_locked(False)
        self._status_bar.showMessage(
            f"{batch.state.value}: {batch.completed_count}/{batch.total_count} "
            f"(failed {batch.failed_count}, cancelled {batch.cancelled_count})"
        )
        if batch.state != BatchState.CANCELLED and batch.completed_count == batch.total_count:
            QMessageBox.information(self, "Complete", "All conversions completed!")

    # ---- window ----

    def _restore_geometry(self):
        geo = self._settings.load_geometry()
        if geo:
            self.restoreGeometry(geo)

    def closeEvent(self, event):
        self._settings.save_geometry(self.saveGeometry())
        self._worker.shutdown()
        super().closeEvent(event)
