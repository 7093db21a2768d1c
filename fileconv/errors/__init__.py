"""错误码枚举与异常类"""

from enum import Enum


class ErrorCode(str, Enum):
    NO_FILES_SELECTED = "E_NO_FILES_SELECTED"
    INVALID_INPUT = "E_INVALID_INPUT"
    OUTPUT_WRITE_FAILED = "E_OUTPUT_WRITE_FAILED"
    PERMISSION_DENIED = "E_PERMISSION_DENIED"
    POOL_CLOSED = "E_POOL_CLOSED"
    BATCH_IN_PROGRESS = "E_BATCH_IN_PROGRESS"
    INVALID_STATE = "E_INVALID_STATE"
    CANCELLED = "E_CANCELLED"
    INTERNAL = "E_INTERNAL"


class TaskError(Exception):
    """所有转换任务异常的基类"""

    def __init__(self, code: ErrorCode, message: str, detail: str = ""):
        self.code = code
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "detail": self.detail,
        }


class NoFilesSelectedError(TaskError):
    def __init__(self, message: str = "No files selected.", detail: str = ""):
        super().__init__(ErrorCode.NO_FILES_SELECTED, message, detail)


class InvalidInputError(TaskError):
    def __init__(self, message: str, detail: str = ""):
        super().__init__(ErrorCode.INVALID_INPUT, message, detail)


class OutputWriteFailedError(TaskError):
    def __init__(self, message: str, detail: str = ""):
        super().__init__(ErrorCode.OUTPUT_WRITE_FAILED, message, detail)


class PermissionDeniedError(TaskError):
    def __init__(self, message: str, detail: str = ""):
        super().__init__(ErrorCode.PERMISSION_DENIED, message, detail)


class PoolClosedError(TaskError):
    def __init__(self, message: str = "Worker pool is closed", detail: str = ""):
        super().__init__(ErrorCode.POOL_CLOSED, message, detail)


class BatchInProgressError(TaskError):
    def __init__(self, message: str = "A batch is already running", detail: str = ""):
        super().__init__(ErrorCode.BATCH_IN_PROGRESS, message, detail)


class InvalidStateError(TaskError):
    def __init__(self, message: str, detail: str = ""):
        super().__init__(ErrorCode.INVALID_STATE, message, detail)


class CancelledError(TaskError):
    def __init__(self, message: str = "Task cancelled by user", detail: str = ""):
        super().__init__(ErrorCode.CANCELLED, message, detail)
