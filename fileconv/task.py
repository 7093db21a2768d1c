"""单文件转换任务：分步执行、进度事件、协作式取消"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from fileconv.api import (
    DEFAULT_STEP_DELAY,
    DEFAULT_STEPS,
    ConversionKind,
    ProgressEvent,
    TaskResult,
    TaskState,
    get_adapter,
    new_id,
)
from fileconv.errors import (
    CancelledError,
    ErrorCode,
    InvalidStateError,
    OutputWriteFailedError,
    TaskError,
)
from fileconv.logging_utils import get_logger

if TYPE_CHECKING:
    from fileconv.adapters import BaseAdapter
    from fileconv.runner.reporter import ProgressReporter

logger = get_logger(__name__)

_TRANSITIONS: dict[TaskState, frozenset[TaskState]] = {
    TaskState.PENDING: frozenset({TaskState.RUNNING, TaskState.CANCELLED}),
    TaskState.RUNNING: frozenset({TaskState.CANCELLED, TaskState.COMPLETED, TaskState.FAILED}),
    TaskState.CANCELLED: frozenset(),
    TaskState.COMPLETED: frozenset(),
    TaskState.FAILED: frozenset(),
}


class ConversionTask:
    """一个文件的转换任务，只能执行一次"""

    def __init__(
        self,
        source_path: str | Path,
        output_path: str | Path,
        kind: ConversionKind = ConversionKind.UNKNOWN,
        *,
        steps: int = DEFAULT_STEPS,
        step_delay: float = DEFAULT_STEP_DELAY,
        adapter: BaseAdapter | None = None,
        task_id: str | None = None,
    ):
        self.task_id = task_id or new_id()
        self.source_path = Path(source_path)
        self.output_path = Path(output_path)
        self.kind = ConversionKind.from_label(kind)
        self.steps = max(0, steps)
        self.step_delay = max(0.0, step_delay)
        self.adapter = adapter or get_adapter(self.kind)
        self.progress_percent = 0
        self.error: dict[str, str] | None = None
        self._state = TaskState.PENDING
        self._started = False
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ConversionTask({self.task_id}, {self.source_path.name!r}, {self._state.value})"

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def started(self) -> bool:
        """已进入执行（被丢弃或拒绝的任务为 False）"""
        return self._started

    @property
    def name(self) -> str:
        return self.source_path.name

    def run(
        self,
        cancel_event: threading.Event | None = None,
        reporter: ProgressReporter | None = None,
    ) -> TaskState:
        """执行全部步骤，将事件推送给 reporter，返回终态"""
        for event in self.iter_progress(cancel_event):
            if reporter is not None:
                reporter.publish(event)
        return self._state

    def iter_progress(self, cancel_event: threading.Event | None = None) -> Iterator[ProgressEvent]:
        """惰性产生进度事件，每一步之间检查取消标志"""
        self._transition(TaskState.RUNNING)
        self._started = True
        logger.debug("任务开始 %s: %s", self.task_id, self.source_path)

        for step in range(self.steps):
            if self._wait(cancel_event):
                yield self._cancelled_event()
                return
            self.progress_percent = step
            yield ProgressEvent(
                self.task_id,
                f"{self.name}: {self.kind.label} - {step}% complete",
                percent=step,
            )

        if self._cancel_requested(cancel_event):
            yield self._cancelled_event()
            return

        try:
            self.adapter.execute(self.source_path, self.output_path, cancel_event)
        except CancelledError:
            yield self._cancelled_event()
            return
        except TaskError as e:
            yield self._failed_event(e)
            return
        except OSError as e:
            yield self._failed_event(
                OutputWriteFailedError(f"Failed to save file: {self.output_path.name}", detail=str(e))
            )
            return

        self.progress_percent = 100
        self._transition(TaskState.COMPLETED)
        yield ProgressEvent(
            self.task_id,
            f"Saved converted file: {self.output_path.name}",
            percent=100,
            state=TaskState.COMPLETED,
        )

    def discard(self) -> bool:
        """丢弃尚未开始的任务（线程池关闭时）"""
        with self._lock:
            if self._state != TaskState.PENDING:
                return False
            self._state = TaskState.CANCELLED
        return True

    def mark_failed(self, exc: BaseException) -> None:
        """记录线程中逸出的意外异常"""
        with self._lock:
            if self._state.terminal:
                return
            self._state = TaskState.FAILED
            self.error = {
                "code": ErrorCode.INTERNAL.value,
                "message": str(exc),
                "detail": type(exc).__name__,
            }

    def result(self) -> TaskResult:
        return TaskResult(
            task_id=self.task_id,
            state=self._state,
            source_path=str(self.source_path),
            output_path=str(self.output_path),
            error=self.error,
        )

    # ---- internal ----

    def _transition(self, new_state: TaskState) -> None:
        with self._lock:
            if new_state not in _TRANSITIONS[self._state]:
                raise InvalidStateError(
                    f"Illegal task transition {self._state.value} -> {new_state.value}",
                    detail=self.task_id,
                )
            self._state = new_state

    def _wait(self, cancel_event: threading.Event | None) -> bool:
        """步间等待，返回 True 表示已请求取消"""
        if cancel_event is None:
            if self.step_delay:
                time.sleep(self.step_delay)
            return False
        return cancel_event.wait(self.step_delay) if self.step_delay else cancel_event.is_set()

    @staticmethod
    def _cancel_requested(cancel_event: threading.Event | None) -> bool:
        return cancel_event is not None and cancel_event.is_set()

    def _cancelled_event(self) -> ProgressEvent:
        self._transition(TaskState.CANCELLED)
        logger.info("任务已取消 %s (%d%%)", self.name, self.progress_percent)
        return ProgressEvent(
            self.task_id,
            f"{self.name}: cancelled at {self.progress_percent}%",
            state=TaskState.CANCELLED,
        )

    def _failed_event(self, error: TaskError) -> ProgressEvent:
        self.error = error.to_dict()
        self._transition(TaskState.FAILED)
        logger.error("任务失败 %s: %s (%s)", self.name, error.message, error.detail)
        message = f"Failed to save file: {self.output_path.name}"
        if error.code != ErrorCode.OUTPUT_WRITE_FAILED:
            message = f"{message} ({error.message})"
        return ProgressEvent(self.task_id, message, state=TaskState.FAILED)
