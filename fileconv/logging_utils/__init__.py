"""统一日志模块：共享 logger、控制台输出、按批次的文件日志"""

import logging
import os
import threading
from datetime import datetime
from pathlib import Path


ROOT_LOGGER = "fileconv"
LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(threadName)s | %(module)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"
DEFAULT_LOG_ROOT = Path.home() / ".file-converter" / "logs"

_configured = False
_config_lock = threading.Lock()


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)


def get_logger(name: str = ROOT_LOGGER, console_level: int = logging.INFO) -> logging.Logger:
    """获取 fileconv 下的 logger；首次调用时给根 logger 挂控制台输出"""
    global _configured
    root = logging.getLogger(ROOT_LOGGER)
    if not _configured:
        with _config_lock:
            if not _configured:
                root.setLevel(logging.DEBUG)
                console = logging.StreamHandler()
                console.setLevel(console_level)
                console.setFormatter(_formatter())
                root.addHandler(console)
                _configured = True

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)


def setup_file_logging(log_dir: str | Path | None = None, task_id: str = "") -> Path:
    """在根 logger 上追加文件处理器，返回日志文件路径

    log_dir 为空时写到 ~/.file-converter/logs/<日期>/。
    """
    root = get_logger()
    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_ROOT / datetime.now().strftime("%Y-%m-%d")
    log_dir.mkdir(parents=True, exist_ok=True)

    log_path = log_dir / (f"{task_id}.log" if task_id else "session.log")
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_formatter())
    root.addHandler(handler)
    return log_path


def close_file_logging(log_path: str | Path) -> bool:
    """移除并关闭 setup_file_logging 创建的处理器"""
    root = get_logger()
    target = os.path.abspath(log_path)
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            root.removeHandler(handler)
            handler.close()
            return True
    return False
