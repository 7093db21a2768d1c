"""Qt bridge: fileconv.JobController events -> UI-thread signals"""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from fileconv.api import BatchInput, ProgressEvent
from fileconv.runner import Batch, JobController, ProgressReporter

from desktop.app.config.settings import AppSettings
from desktop.app.core.adapter import build_controller


class ConversionWorker(QObject):
    """Owns the controller and forwards reporter events through queued signals.

    The reporter's drain thread emits the signals; Qt delivers them on the
    thread that owns this object (the UI thread), so slots may touch widgets.
    """

    event_received = Signal(object)    # ProgressEvent
    batch_started = Signal(object)     # Batch
    batch_finished = Signal(object)    # Batch

    def __init__(self, settings: AppSettings, parent=None):
        super().__init__(parent)
        self._settings = settings
        self._reporter = ProgressReporter(self._forward)
        self._controller: JobController | None = None
        self._reporter.start()

    @property
    def running(self) -> bool:
        batch = self._controller.active_batch if self._controller else None
        return batch is not None and not batch.done

    def start(self, batch_input: BatchInput) -> Batch:
        # Rebuilt per batch so changed settings apply to the next run.
        if not self.running:
            self._controller = build_controller(self._settings, self._reporter)
            self._controller.add_batch_callback(self.batch_finished.emit)
        batch = self._controller.start_batch(batch_input)
        self.batch_started.emit(batch)
        return batch

    def cancel(self) -> bool:
        if self._controller is None:
            return False
        return self._controller.cancel()

    def shutdown(self, timeout: float = 3.0) -> None:
        if self._controller is not None:
            self._controller.close(timeout)
        self._reporter.close(timeout)

    def _forward(self, event: ProgressEvent) -> None:
        self.event_received.emit(event)
