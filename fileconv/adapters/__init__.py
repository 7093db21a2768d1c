"""适配器基类与公共工具"""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from fileconv.errors import (
    CancelledError,
    InvalidInputError,
    PermissionDeniedError,
)


class BaseAdapter(ABC):
    """所有转换适配器的基类"""

    @abstractmethod
    def execute(
        self,
        source: Path,
        destination: Path,
        cancel_event: threading.Event | None = None,
    ) -> Path:
        ...

    # ---- 公共校验 ----

    @staticmethod
    def validate_input_path(path_str: str | Path, must_be_file: bool = True) -> Path:
        p = Path(path_str)
        if not p.exists():
            raise InvalidInputError(f"Path does not exist: {path_str}")
        if must_be_file and p.is_dir():
            raise InvalidInputError(f"Expected a file but got a directory: {path_str}")
        return p

    @staticmethod
    def ensure_output_dir(output_dir: str | Path) -> Path:
        """幂等创建输出目录，多个任务并发调用也安全"""
        d = Path(output_dir)
        d.mkdir(parents=True, exist_ok=True)
        if not os.access(d, os.W_OK):
            raise PermissionDeniedError(f"Output directory is not writable: {d}")
        return d

    @staticmethod
    def ensure_not_cancelled(
        cancel_event: threading.Event | None,
        *,
        detail: str = "",
    ) -> None:
        """协作式取消检查。"""
        if cancel_event is not None and cancel_event.is_set():
            raise CancelledError(detail=detail)
