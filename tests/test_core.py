"""fileconv core 基础测试：模型、错误码、任务、适配器、日志"""

import threading
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from fileconv.api import (
    BatchInput,
    ConversionKind,
    ConverterOptions,
    TaskResult,
    TaskState,
    get_adapter,
)
from fileconv.task import ConversionTask


def _source(tmp_path: Path, name: str = "a.txt", data: bytes = b"hello converter") -> Path:
    src = tmp_path / "in" / name
    src.parent.mkdir(parents=True, exist_ok=True)
    src.write_bytes(data)
    return src


# ---------------------------------------------------------------------------
# 模型测试
# ---------------------------------------------------------------------------

class TestConversionKind:
    def test_from_label_known(self):
        assert ConversionKind.from_label("Resize Image") is ConversionKind.RESIZE_IMAGE
        assert ConversionKind.from_label("PDF to DOCX") is ConversionKind.PDF_TO_DOCX

    def test_from_label_unknown_or_missing(self):
        assert ConversionKind.from_label("Make Coffee") is ConversionKind.UNKNOWN
        assert ConversionKind.from_label(None) is ConversionKind.UNKNOWN

    def test_from_flags_pdf_wins(self):
        assert ConversionKind.from_flags(True, True) is ConversionKind.PDF_TO_DOCX
        assert ConversionKind.from_flags(False, True) is ConversionKind.RESIZE_IMAGE
        assert ConversionKind.from_flags(False, False) is ConversionKind.UNKNOWN


class TestBatchInput:
    def test_empty_raises_no_files_selected(self):
        from fileconv.errors import NoFilesSelectedError
        with pytest.raises(NoFilesSelectedError):
            BatchInput.of([], "Resize Image")

    def test_is_immutable(self):
        batch_input = BatchInput.of(["/tmp/a.txt", "/tmp/b.txt"], "Resize Image")
        assert batch_input.files == (Path("/tmp/a.txt"), Path("/tmp/b.txt"))
        assert batch_input.kind is ConversionKind.RESIZE_IMAGE
        with pytest.raises(FrozenInstanceError):
            batch_input.kind = ConversionKind.UNKNOWN

    def test_single_path_is_one_file(self):
        assert BatchInput.of("/tmp/a.txt", None).files == (Path("/tmp/a.txt"),)
        assert BatchInput.of(Path("/tmp/b.txt"), None).files == (Path("/tmp/b.txt"),)

    def test_empty_string_raises_no_files_selected(self):
        from fileconv.errors import NoFilesSelectedError
        with pytest.raises(NoFilesSelectedError):
            BatchInput.of("", "Resize Image")


class TestConverterOptions:
    def test_defaults(self):
        opts = ConverterOptions()
        assert opts.workers == 4
        assert opts.steps == 100
        assert opts.output_prefix == "converted_"
        assert opts.resolve_output_dir() == Path.home() / "Downloads"

    def test_output_path_for(self, tmp_path):
        opts = ConverterOptions(output_dir=tmp_path)
        assert opts.output_path_for("/some/where/a.txt") == tmp_path / "converted_a.txt"


class TestTaskResult:
    def test_to_dict(self):
        res = TaskResult(
            task_id="abc123", state=TaskState.FAILED,
            source_path="/in/a.txt", output_path="/out/converted_a.txt",
            error={"code": "E_OUTPUT_WRITE_FAILED", "message": "x", "detail": ""},
        )
        d = res.to_dict()
        assert d["ok"] is False
        assert d["state"] == "failed"
        assert d["error"]["code"] == "E_OUTPUT_WRITE_FAILED"


# ---------------------------------------------------------------------------
# 错误码测试
# ---------------------------------------------------------------------------

class TestErrors:
    def test_error_code_values(self):
        from fileconv.errors import ErrorCode
        assert ErrorCode.NO_FILES_SELECTED.value == "E_NO_FILES_SELECTED"
        assert ErrorCode.POOL_CLOSED.value == "E_POOL_CLOSED"

    def test_task_error_to_dict(self):
        from fileconv.errors import OutputWriteFailedError
        d = OutputWriteFailedError("Failed to save file: converted_a.txt", detail="disk full").to_dict()
        assert d["code"] == "E_OUTPUT_WRITE_FAILED"
        assert d["detail"] == "disk full"

    def test_all_error_subclasses(self):
        from fileconv.errors import (
            BatchInProgressError, CancelledError, InvalidInputError, InvalidStateError,
            NoFilesSelectedError, PermissionDeniedError, PoolClosedError,
        )
        assert NoFilesSelectedError().code.value == "E_NO_FILES_SELECTED"
        assert NoFilesSelectedError().message == "No files selected."
        assert PoolClosedError().code.value == "E_POOL_CLOSED"
        assert InvalidInputError("x").code.value == "E_INVALID_INPUT"
        assert PermissionDeniedError("x").code.value == "E_PERMISSION_DENIED"
        assert BatchInProgressError().code.value == "E_BATCH_IN_PROGRESS"
        assert InvalidStateError("x").code.value == "E_INVALID_STATE"
        assert CancelledError().code.value == "E_CANCELLED"


# ---------------------------------------------------------------------------
# 任务测试
# ---------------------------------------------------------------------------

class TestConversionTask:
    def test_copies_bytes_and_reports(self, tmp_path):
        src = _source(tmp_path)
        out = tmp_path / "Downloads" / "converted_a.txt"
        task = ConversionTask(src, out, "Resize Image", steps=3, step_delay=0)

        events = list(task.iter_progress())

        assert [e.percent for e in events[:-1]] == [0, 1, 2]
        assert events[0].message == "a.txt: Resize Image - 0% complete"
        assert events[-1].state is TaskState.COMPLETED
        assert events[-1].message == "Saved converted file: converted_a.txt"
        assert task.state is TaskState.COMPLETED
        assert out.read_bytes() == src.read_bytes()

    def test_percent_strictly_increasing_within_bounds(self, tmp_path):
        task = ConversionTask(_source(tmp_path), tmp_path / "out" / "x", steps=100, step_delay=0)
        percents = [e.percent for e in task.iter_progress() if not e.terminal]
        assert percents == list(range(100))

    def test_run_publishes_to_reporter(self, tmp_path):
        from fileconv.runner import ProgressReporter
        seen = []
        reporter = ProgressReporter(seen.append)
        task = ConversionTask(_source(tmp_path), tmp_path / "out" / "x", steps=2, step_delay=0)
        assert task.run(reporter=reporter) is TaskState.COMPLETED
        assert reporter.drain() == 3
        assert [e.percent for e in seen] == [0, 1, 100]

    def test_cancelled_before_start_skips_work(self, tmp_path):
        out = tmp_path / "out" / "converted_a.txt"
        task = ConversionTask(_source(tmp_path), out, steps=5, step_delay=0)
        cancel = threading.Event()
        cancel.set()

        assert task.run(cancel) is TaskState.CANCELLED
        assert not out.exists()

    def test_cancel_between_steps(self, tmp_path):
        out = tmp_path / "out" / "converted_a.txt"
        task = ConversionTask(_source(tmp_path), out, steps=10, step_delay=0)
        cancel = threading.Event()

        events = []
        for event in task.iter_progress(cancel):
            events.append(event)
            if event.percent == 2:
                cancel.set()

        assert [e.percent for e in events[:-1]] == [0, 1, 2]
        assert events[-1].state is TaskState.CANCELLED
        assert task.state is TaskState.CANCELLED
        assert not out.exists()

    def test_missing_source_fails(self, tmp_path):
        task = ConversionTask(tmp_path / "missing.txt", tmp_path / "out" / "converted_missing.txt",
                              steps=1, step_delay=0)
        events = list(task.iter_progress())
        assert task.state is TaskState.FAILED
        assert task.error["code"] == "E_INVALID_INPUT"
        assert events[-1].message.startswith("Failed to save file: converted_missing.txt")

    def test_write_failure_reports_failed(self, tmp_path, monkeypatch):
        def broken_copy(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("fileconv.adapters.copy_convert.shutil.copyfile", broken_copy)
        task = ConversionTask(_source(tmp_path), tmp_path / "out" / "converted_a.txt",
                              steps=1, step_delay=0)
        events = list(task.iter_progress())
        assert task.state is TaskState.FAILED
        assert task.error["code"] == "E_OUTPUT_WRITE_FAILED"
        assert events[-1].message == "Failed to save file: converted_a.txt"

    def test_output_dir_is_a_file(self, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("not a dir")
        task = ConversionTask(_source(tmp_path), blocker / "converted_a.txt", steps=1, step_delay=0)
        assert task.run() is TaskState.FAILED
        assert task.error["code"] == "E_OUTPUT_WRITE_FAILED"

    def test_terminal_task_cannot_rerun(self, tmp_path):
        from fileconv.errors import InvalidStateError
        task = ConversionTask(_source(tmp_path), tmp_path / "out" / "x", steps=1, step_delay=0)
        task.run()
        with pytest.raises(InvalidStateError):
            task.run()

    def test_discard_only_pending(self, tmp_path):
        task = ConversionTask(_source(tmp_path), tmp_path / "out" / "x", steps=1, step_delay=0)
        assert task.discard() is True
        assert task.state is TaskState.CANCELLED
        assert task.discard() is False


# ---------------------------------------------------------------------------
# 适配器测试
# ---------------------------------------------------------------------------

class TestAdapters:
    def test_every_kind_copies(self):
        from fileconv.adapters.copy_convert import CopyConvertAdapter
        for kind in ConversionKind:
            assert isinstance(get_adapter(kind), CopyConvertAdapter)
        assert isinstance(get_adapter("nonsense"), CopyConvertAdapter)

    def test_copy_replaces_existing_output(self, tmp_path):
        from fileconv.adapters.copy_convert import CopyConvertAdapter
        src = _source(tmp_path, data=b"new")
        out = tmp_path / "out" / "converted_a.txt"
        out.parent.mkdir()
        out.write_bytes(b"old contents")
        CopyConvertAdapter().execute(src, out)
        assert out.read_bytes() == b"new"

    def test_ensure_output_dir_concurrent(self, tmp_path):
        from fileconv.adapters import BaseAdapter
        target = tmp_path / "Downloads" / "nested"
        barrier = threading.Barrier(8)
        errors = []

        def create():
            barrier.wait()
            try:
                BaseAdapter.ensure_output_dir(target)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=create) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert target.is_dir()
        assert [p.name for p in target.parent.iterdir()] == ["nested"]

    def test_adapter_honours_cancel(self, tmp_path):
        from fileconv.adapters.copy_convert import CopyConvertAdapter
        from fileconv.errors import CancelledError
        cancel = threading.Event()
        cancel.set()
        out = tmp_path / "out" / "converted_a.txt"
        with pytest.raises(CancelledError):
            CopyConvertAdapter().execute(_source(tmp_path), out, cancel)
        assert not out.exists()


# ---------------------------------------------------------------------------
# Logging 测试
# ---------------------------------------------------------------------------

class TestLogging:
    def test_get_logger_returns_logger(self):
        from fileconv.logging_utils import get_logger
        lg = get_logger()
        assert lg is not None
        assert lg.name == "fileconv"

    def test_file_logging_attach_and_close(self, tmp_path):
        from fileconv.logging_utils import close_file_logging, get_logger, setup_file_logging
        log_path = setup_file_logging(log_dir=tmp_path, task_id="batch123")
        assert log_path == tmp_path / "batch123.log"
        get_logger().info("hello")
        assert close_file_logging(log_path) is True
        assert close_file_logging(log_path) is False
        assert "hello" in log_path.read_text(encoding="utf-8")
