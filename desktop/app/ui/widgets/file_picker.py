"""Multi-file picker: Select Files button + list of the chosen paths"""

from pathlib import Path

from PySide6.QtWidgets import QWidget, QVBoxLayout, QListWidget, QPushButton, QFileDialog
from PySide6.QtCore import Signal


class FileListPicker(QWidget):
    """Lets the user choose several files; keeps the last selection."""

    files_selected = Signal(list)   # list[str]

    def __init__(self, start_dir: str = "", parent=None):
        super().__init__(parent)
        self._start_dir = start_dir
        self._files: list[str] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.btn_select = QPushButton("Select Files")
        self.btn_select.clicked.connect(self.select_files)
        layout.addWidget(self.btn_select)

        self._list = QListWidget()
        self._list.setObjectName("file_list")
        layout.addWidget(self._list, 1)

    def files(self) -> list[str]:
        return list(self._files)

    def set_files(self, files: list[str]):
        self._files = list(files)
        self._list.clear()
        self._list.addItems([Path(f).name for f in self._files])

    def select_files(self) -> list[str]:
        """Open the dialog; a cancelled dialog keeps the previous selection."""
        files, _ = QFileDialog.getOpenFileNames(self, "Select Files", self._start_dir, "All files (*)")
        if files:
            self._start_dir = str(Path(files[0]).parent)
            self.set_files(files)
            self.files_selected.emit(self.files())
        return self.files()

    @property
    def start_dir(self) -> str:
        return self._start_dir
