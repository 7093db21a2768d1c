"""批次控制器：每个文件一个任务、汇总完成数、整批取消"""

from __future__ import annotations

import functools
import threading
from concurrent.futures import Future
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from fileconv.api import (
    BatchInput,
    ConversionKind,
    ConverterOptions,
    ProgressEvent,
    TaskResult,
    TaskState,
    new_id,
)
from fileconv.errors import BatchInProgressError, PoolClosedError
from fileconv.logging_utils import close_file_logging, get_logger, setup_file_logging
from fileconv.runner.pool import WorkerPool
from fileconv.runner.reporter import ProgressReporter
from fileconv.task import ConversionTask

logger = get_logger(__name__)


class BatchState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially_failed"
    CANCELLED = "cancelled"


class Batch:
    """一次提交产生的任务集合，也是 start_batch 返回的句柄"""

    def __init__(self, batch_id: str, kind: ConversionKind, tasks: Iterable[ConversionTask]):
        self.batch_id = batch_id
        self.kind = kind
        self.tasks: tuple[ConversionTask, ...] = tuple(tasks)
        self.total_count = len(self.tasks)
        self.completed_count = 0  # Completed + Failed
        self.failed_count = 0
        self.cancelled_count = 0
        self.log_path: Path | None = None
        self._recorded: set[str] = set()
        self._cancel_requested = False
        self._final_state: BatchState | None = None
        self._lock = threading.Lock()
        self._done = threading.Event()

    def __repr__(self) -> str:
        return f"Batch({self.batch_id}, {self.state.value}, {self.finished_count}/{self.total_count})"

    @property
    def state(self) -> BatchState:
        if self._final_state is not None:
            return self._final_state
        if any(t.started for t in self.tasks):
            return BatchState.RUNNING
        return BatchState.PENDING

    @property
    def finished_count(self) -> int:
        return self.completed_count + self.cancelled_count

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def results(self) -> list[TaskResult]:
        return [t.result() for t in self.tasks]

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "kind": self.kind.label,
            "state": self.state.value,
            "total": self.total_count,
            "completed": self.completed_count,
            "failed": self.failed_count,
            "cancelled": self.cancelled_count,
            "tasks": [r.to_dict() for r in self.results()],
        }

    # ---- internal ----

    def _request_cancel(self) -> bool:
        with self._lock:
            if self._final_state is not None:
                return False
            self._cancel_requested = True
            return True

    def _record(self, task: ConversionTask) -> bool:
        """统计一个已到达终态的任务；返回 True 表示本次调用使批次结束"""
        with self._lock:
            if task.task_id in self._recorded:
                return False
            self._recorded.add(task.task_id)

            if task.state == TaskState.CANCELLED:
                self.cancelled_count += 1
            else:
                self.completed_count += 1
                if task.state == TaskState.FAILED:
                    self.failed_count += 1

            if self._final_state is not None or len(self._recorded) < self.total_count:
                return False
            if self._cancel_requested or self.cancelled_count:
                self._final_state = BatchState.CANCELLED
            elif self.failed_count:
                self._final_state = BatchState.PARTIALLY_FAILED
            else:
                self._final_state = BatchState.COMPLETED
            return True


BatchCallback = Callable[[Batch], None]


class JobController:
    """接收文件列表，为每个文件提交一个任务到独立的线程池"""

    def __init__(
        self,
        options: ConverterOptions | None = None,
        reporter: ProgressReporter | None = None,
        pool_factory: Callable[[int], WorkerPool] = WorkerPool,
    ):
        self.options = options or ConverterOptions()
        self.reporter = reporter or ProgressReporter()
        self._pool_factory = pool_factory
        self._lock = threading.Lock()
        self._active: Batch | None = None
        self._pools: dict[str, WorkerPool] = {}
        self._callbacks: list[BatchCallback] = []

    @property
    def active_batch(self) -> Batch | None:
        return self._active

    def add_batch_callback(self, callback: BatchCallback) -> None:
        """批次结束时调用一次（在工作线程中）"""
        self._callbacks.append(callback)

    def start_batch(
        self,
        files: BatchInput | str | Path | Iterable[str | Path],
        kind: str | ConversionKind | None = None,
    ) -> Batch:
        batch_input = files if isinstance(files, BatchInput) else BatchInput.of(files, kind)

        with self._lock:
            if self._active is not None and not self._active.done:
                raise BatchInProgressError(detail=self._active.batch_id)
            tasks = [
                ConversionTask(
                    path,
                    self.options.output_path_for(path),
                    batch_input.kind,
                    steps=self.options.steps,
                    step_delay=self.options.step_delay,
                )
                for path in batch_input.files
            ]
            batch = Batch(new_id(), batch_input.kind, tasks)
            pool = self._pool_factory(self.options.workers)
            self._active = batch
            self._pools[batch.batch_id] = pool

        if self.options.log_dir:
            batch.log_path = setup_file_logging(self.options.log_dir, task_id=batch.batch_id)

        logger.info(
            "批次开始 %s: %s, %d 个文件, %d 个线程",
            batch.batch_id, batch.kind.label, batch.total_count, pool.capacity,
        )
        self.reporter.status(f"Starting {batch.kind.label} for {batch.total_count} file(s)")

        for task in tasks:
            try:
                future = pool.submit(task, self.reporter)
            except PoolClosedError as e:
                logger.warning("任务提交被拒绝 %s: %s", task.name, e.message)
                task.discard()
                self.reporter.publish(
                    ProgressEvent(task.task_id, f"{task.name}: {e.message}", state=TaskState.CANCELLED)
                )
                self._record(batch, task)
                continue
            future.add_done_callback(functools.partial(self._on_task_done, batch, task))
        return batch

    def cancel(self, batch: Batch | None = None) -> bool:
        """关闭批次的线程池；已结束的任务保持原状态"""
        batch = batch or self._active
        if batch is None or not batch._request_cancel():
            return False

        logger.warning("批次取消 %s", batch.batch_id)
        self.reporter.status("Conversion process cancelled.")
        with self._lock:
            pool = self._pools.get(batch.batch_id)
        if pool is not None:
            pool.shutdown_now()
        return True

    def close(self, timeout: float | None = None) -> None:
        """取消正在运行的批次并等待其结束"""
        batch = self._active
        if batch is not None and not batch.done:
            self.cancel(batch)
            batch.wait(timeout)

    # ---- internal ----

    def _on_task_done(self, batch: Batch, task: ConversionTask, future: Future) -> None:
        if future.cancelled():
            task.discard()
            self.reporter.publish(
                ProgressEvent(task.task_id, f"{task.name}: cancelled before start", state=TaskState.CANCELLED)
            )
        else:
            exc = future.exception()
            if exc is not None:
                logger.error("任务线程异常 %s: %s", task.name, exc)
                task.mark_failed(exc)
                self.reporter.publish(
                    ProgressEvent(
                        task.task_id,
                        f"Failed to save file: {task.output_path.name} ({exc})",
                        state=TaskState.FAILED,
                    )
                )
        self._record(batch, task)

    def _record(self, batch: Batch, task: ConversionTask) -> None:
        if batch._record(task):
            self._finish(batch)

    def _finish(self, batch: Batch) -> None:
        with self._lock:
            pool = self._pools.pop(batch.batch_id, None)
        if pool is not None:
            pool.shutdown(wait=False)

        if batch.completed_count == batch.total_count and not batch.cancel_requested:
            self.reporter.status("All conversions completed!")
        logger.info(
            "批次结束 %s: %s (完成 %d, 失败 %d, 取消 %d)",
            batch.batch_id, batch.state.value,
            batch.completed_count, batch.failed_count, batch.cancelled_count,
        )
        if batch.log_path is not None:
            close_file_logging(batch.log_path)

        for callback in list(self._callbacks):
            try:
                callback(batch)
            except Exception:
                logger.exception("批次回调异常: %s", batch.batch_id)
        batch._done.set()
