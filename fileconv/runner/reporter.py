"""进度通道：工作线程发布事件，单一消费者按顺序投递"""

from __future__ import annotations

import queue
import threading
from typing import Callable

from fileconv.api import ProgressEvent
from fileconv.logging_utils import get_logger

logger = get_logger(__name__)

Sink = Callable[[ProgressEvent], None]

_STOP = object()


class ProgressReporter:
    """
    publish() 永不阻塞；事件由 drain 线程（start/close）或调用方自己的循环
    （drain）按发布顺序交给所有 sink。
    """

    def __init__(self, sink: Sink | None = None):
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._sinks: list[Sink] = []
        self._sinks_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        if sink is not None:
            self.subscribe(sink)

    def subscribe(self, sink: Sink) -> None:
        with self._sinks_lock:
            self._sinks.append(sink)

    def publish(self, event: ProgressEvent) -> None:
        self._queue.put(event)

    def status(self, message: str) -> None:
        """发布批次级别的状态行"""
        self.publish(ProgressEvent(None, message))

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._thread = threading.Thread(
            target=self._drain_loop,
            name="fileconv-reporter",
            daemon=True,
        )
        self._thread.start()

    def close(self, timeout: float | None = None) -> None:
        """投递完已发布的事件后停止 drain 线程"""
        if not self.running:
            return
        self._queue.put(_STOP)
        self._thread.join(timeout)
        self._thread = None

    def drain(self, max_items: int | None = None) -> int:
        """非阻塞地投递队列中的事件，供自带事件循环的调用方使用"""
        delivered = 0
        while max_items is None or delivered < max_items:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _STOP:
                continue
            self._deliver(item)
            delivered += 1
        return delivered

    # ---- internal ----

    def _drain_loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self._deliver(item)

    def _deliver(self, event: ProgressEvent) -> None:
        with self._sinks_lock:
            sinks = list(self._sinks)
        for sink in sinks:
            try:
                sink(event)
            except Exception:
                logger.exception("进度回调异常: %s", event.message)
