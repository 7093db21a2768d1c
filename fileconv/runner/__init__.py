"""任务执行器：线程池、进度通道、批次控制与取消"""

from fileconv.runner.controller import Batch, BatchState, JobController
from fileconv.runner.pool import WorkerPool
from fileconv.runner.reporter import ProgressReporter

__all__ = ["Batch", "BatchState", "JobController", "ProgressReporter", "WorkerPool"]
