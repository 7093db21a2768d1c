"""复制适配器：以原样复制字节模拟转换"""

from __future__ import annotations

import shutil
import threading
from pathlib import Path

from fileconv.adapters import BaseAdapter
from fileconv.errors import OutputWriteFailedError
from fileconv.logging_utils import get_logger

logger = get_logger(__name__)


class CopyConvertAdapter(BaseAdapter):
    """将源文件复制到目标路径，已存在的输出会被覆盖"""

    def execute(
        self,
        source: Path,
        destination: Path,
        cancel_event: threading.Event | None = None,
    ) -> Path:
        source = self.validate_input_path(source)
        self.ensure_output_dir(destination.parent)
        self.ensure_not_cancelled(
            cancel_event,
            detail=f"cancelled before writing {destination.name}",
        )

        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            logger.error("写入失败 %s: %s", destination, exc)
            raise OutputWriteFailedError(
                f"Failed to save file: {destination.name}",
                detail=str(exc),
            ) from exc

        logger.debug("已写入 %s (%d bytes)", destination, destination.stat().st_size)
        return destination
