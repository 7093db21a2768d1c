"""QSettings-based config persistence"""

from PySide6.QtCore import QSettings

from fileconv.api import DEFAULT_WORKERS


class AppSettings:
    """Wraps QSettings for converter preferences."""

    _ORG = "file-converter"
    _APP = "desktop"

    def __init__(self, qsettings: QSettings | None = None):
        self._qs = qsettings or QSettings(self._ORG, self._APP)

    # ---- output dir (empty -> ~/Downloads) ----
    @property
    def output_dir(self) -> str:
        return self._qs.value("output_dir", "", type=str)

    @output_dir.setter
    def output_dir(self, v: str):
        self._qs.setValue("output_dir", v)

    # ---- worker count ----
    @property
    def worker_count(self) -> int:
        return self._qs.value("worker_count", DEFAULT_WORKERS, type=int)

    @worker_count.setter
    def worker_count(self, v: int):
        self._qs.setValue("worker_count", max(1, v))

    # ---- last directory used in the file dialog ----
    @property
    def last_input_dir(self) -> str:
        return self._qs.value("last_input_dir", "", type=str)

    @last_input_dir.setter
    def last_input_dir(self, v: str):
        self._qs.setValue("last_input_dir", v)

    # ---- window geometry ----
    def save_geometry(self, geo: bytes):
        self._qs.setValue("window_geometry", geo)

    def load_geometry(self) -> bytes | None:
        return self._qs.value("window_geometry")
