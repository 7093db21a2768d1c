from .file_picker import FileListPicker
from .log_panel import LogPanel
from .settings_panel import SettingsPanel
from .task_controls import TaskControls

__all__ = ["FileListPicker", "LogPanel", "SettingsPanel", "TaskControls"]
