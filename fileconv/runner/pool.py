"""固定容量线程池：提交、立即关闭、丢弃排队任务"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from fileconv.api import DEFAULT_WORKERS, TaskState
from fileconv.errors import PoolClosedError
from fileconv.logging_utils import get_logger

if TYPE_CHECKING:
    from fileconv.runner.reporter import ProgressReporter
    from fileconv.task import ConversionTask

logger = get_logger(__name__)


class WorkerPool:
    """最多 capacity 个任务并发运行，多余的按 FIFO 排队"""

    def __init__(self, capacity: int = DEFAULT_WORKERS, name: str = "fileconv"):
        self.capacity = max(1, capacity)
        self._executor = ThreadPoolExecutor(
            max_workers=self.capacity,
            thread_name_prefix=name,
        )
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._closed = False
        self._pending: dict[Future, ConversionTask] = {}
        self._running = 0
        self._peak_running = 0

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> int:
        return self._running

    @property
    def peak_running(self) -> int:
        return self._peak_running

    def submit(
        self,
        task: ConversionTask,
        reporter: ProgressReporter | None = None,
    ) -> Future:
        with self._lock:
            if self._closed:
                raise PoolClosedError(detail=f"rejected {task.name}")
            future = self._executor.submit(self._execute, task, reporter)
            self._pending[future] = task
        future.add_done_callback(self._forget)
        return future

    def shutdown_now(self) -> list[ConversionTask]:
        """停止接收新任务、通知运行中的任务取消、丢弃排队任务并返回它们"""
        with self._lock:
            already_closed = self._closed
            self._closed = True
            queued = list(self._pending.items())

        discarded: list[ConversionTask] = []
        if not already_closed:
            # 排队任务须在设置取消标志之前撤下；
            # cancel() 会同步触发 done 回调，此处不能持锁
            for future, task in queued:
                if future.cancel():
                    task.discard()
                    discarded.append(task)
        self._cancel_event.set()
        if not already_closed:
            self._executor.shutdown(wait=False, cancel_futures=True)
            logger.info("线程池已关闭，丢弃 %d 个排队任务", len(discarded))
        return discarded

    def shutdown(self, wait: bool = True) -> None:
        """正常关闭：不再接收任务，已提交的任务照常执行"""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    # ---- internal ----

    def _execute(self, task: ConversionTask, reporter: ProgressReporter | None) -> TaskState:
        with self._lock:
            self._running += 1
            self._peak_running = max(self._peak_running, self._running)
        try:
            return task.run(self._cancel_event, reporter)
        finally:
            with self._lock:
                self._running -= 1

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.pop(future, None)
