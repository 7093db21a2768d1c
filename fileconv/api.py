"""请求/响应模型与转换适配器注册表"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

from fileconv.errors import NoFilesSelectedError

if TYPE_CHECKING:
    from fileconv.adapters import BaseAdapter


DEFAULT_WORKERS = 4
DEFAULT_STEPS = 100
DEFAULT_STEP_DELAY = 0.05
DEFAULT_OUTPUT_PREFIX = "converted_"


# ---------------------------------------------------------------------------
# 请求 / 响应模型
# ---------------------------------------------------------------------------

class TaskState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (TaskState.CANCELLED, TaskState.COMPLETED, TaskState.FAILED)


class ConversionKind(str, Enum):
    PDF_TO_DOCX = "PDF to DOCX"
    RESIZE_IMAGE = "Resize Image"
    UNKNOWN = "Unknown"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str | ConversionKind | None) -> ConversionKind:
        """未知或未选择的标签统一映射为 UNKNOWN"""
        if isinstance(label, cls):
            return label
        for kind in cls:
            if kind.value == label:
                return kind
        return cls.UNKNOWN

    @classmethod
    def from_flags(cls, pdf_to_docx: bool, resize_image: bool) -> ConversionKind:
        """两个选项同时勾选时 PDF to DOCX 优先"""
        if pdf_to_docx:
            return cls.PDF_TO_DOCX
        if resize_image:
            return cls.RESIZE_IMAGE
        return cls.UNKNOWN


@dataclass
class ConverterOptions:
    workers: int = DEFAULT_WORKERS
    steps: int = DEFAULT_STEPS
    step_delay: float = DEFAULT_STEP_DELAY
    output_dir: str | Path | None = None
    output_prefix: str = DEFAULT_OUTPUT_PREFIX
    log_dir: str | Path | None = None

    def resolve_output_dir(self) -> Path:
        if self.output_dir:
            return Path(self.output_dir).expanduser()
        return Path.home() / "Downloads"

    def output_path_for(self, source: str | Path) -> Path:
        return self.resolve_output_dir() / f"{self.output_prefix}{Path(source).name}"


@dataclass(frozen=True)
class BatchInput:
    """一次提交的不可变输入：文件列表 + 转换类型"""

    files: tuple[Path, ...]
    kind: ConversionKind = ConversionKind.UNKNOWN

    @classmethod
    def of(
        cls,
        files: str | Path | Iterable[str | Path],
        kind: str | ConversionKind | None = None,
    ) -> BatchInput:
        # 单个路径按一个文件处理，不拆成字符
        if isinstance(files, (str, Path)):
            files = [files]
        paths = tuple(Path(f) for f in files if f)
        if not paths:
            raise NoFilesSelectedError()
        return cls(files=paths, kind=ConversionKind.from_label(kind))


@dataclass
class ProgressEvent:
    """task_id 为 None 表示批次级别的状态行"""

    task_id: str | None
    message: str
    percent: int | None = None
    state: TaskState | None = None

    @property
    def terminal(self) -> bool:
        return self.state is not None


@dataclass
class TaskResult:
    task_id: str
    state: TaskState
    source_path: str
    output_path: str
    error: dict[str, str] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.state == TaskState.COMPLETED

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "ok": self.ok,
            "task_id": self.task_id,
            "state": self.state.value,
            "source_path": self.source_path,
            "output_path": self.output_path,
        }
        if self.error:
            d["error"] = self.error
        return d


def new_id() -> str:
    return uuid.uuid4().hex[:12]


# ---------------------------------------------------------------------------
# 适配器注册表
# ---------------------------------------------------------------------------

_ADAPTERS: dict[ConversionKind, BaseAdapter] = {}


def _ensure_adapters():
    if _ADAPTERS:
        return
    from fileconv.adapters.copy_convert import CopyConvertAdapter

    # 目前所有转换类型都只复制字节，类型仅作为标签
    copier = CopyConvertAdapter()
    for kind in ConversionKind:
        _ADAPTERS[kind] = copier


def get_adapter(kind: str | ConversionKind | None) -> BaseAdapter:
    _ensure_adapters()
    return _ADAPTERS[ConversionKind.from_label(kind)]


def register_adapter(kind: ConversionKind, adapter: BaseAdapter) -> None:
    _ensure_adapters()
    _ADAPTERS[kind] = adapter
