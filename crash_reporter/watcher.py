"""监视模拟器 DiagnosticReports 目录中新写出的 ``.crash`` 文件。"""
from __future__ import annotations
import logging
import os
import threading
from collections import OrderedDict
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from config.constants import (
    CRASH_FILE_COMPLETE_MARKER,
    CRASH_FILE_SUFFIX,
    DEFAULT_MAX_BYTES,
    DIAGNOSTIC_REPORTS_DIR,
    MAX_SEEN_CRASH_FILES,
    OS_IOS,
)
from .device import BaseDevice
from .errors import UserError
from .events import CrashEvent, EventTypes
from .file_io import read_text_limited
from .models import Crash
from .paths import should_show_crash_notification
from .reporter import CrashReporter

logger = logging.getLogger(__name__)


class _CrashFileHandler(FileSystemEventHandler):
    def __init__(self, watcher: "DiagnosticReportsWatcher") -> None:
        super().__init__()
        self._watcher = watcher

    def _dispatch(self, path) -> None:
        try:
            self._watcher.handle_file(os.fsdecode(path))
        except Exception:
            logger.exception("Failed to process crash file %s", path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch(event.dest_path)


class DiagnosticReportsWatcher:
    """将所选 iOS 模拟器写出的崩溃文件交给 reporter。

    ``Path:`` 指向其他模拟器的文件会被忽略。文件写到 ``Exception Type:``
    之前视为未完成，等后续 modified 事件再处理；每个文件只上报一次。
    """

    def __init__(
        self,
        reporter: CrashReporter,
        reports_dir: str = DIAGNOSTIC_REPORTS_DIR,
        suffix: str = CRASH_FILE_SUFFIX,
        max_bytes: int = DEFAULT_MAX_BYTES,
        device_provider: Optional[Callable[[], Optional[BaseDevice]]] = None,
        max_seen: int = MAX_SEEN_CRASH_FILES,
    ) -> None:
        self.reporter = reporter
        self.reports_dir = reports_dir
        self.suffix = suffix
        self.max_bytes = max_bytes
        self.device_provider = device_provider or (lambda: reporter.selected_device)
        self.max_seen = max_seen
        self._observer = None
        self._seen: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        if not os.path.isdir(self.reports_dir):
            raise UserError(f"Crash reports directory not found: {self.reports_dir}")
        observer = Observer()
        observer.schedule(_CrashFileHandler(self), self.reports_dir, recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("Watching %s for *%s files", self.reports_dir, self.suffix)

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join()
        logger.info("Stopped watching %s", self.reports_dir)

    def _already_reported(self, key: str) -> bool:
        with self._lock:
            return key in self._seen

    def _mark_reported(self, key: str) -> bool:
        """记录文件已上报；并发事件中只有第一个返回 True。"""
        with self._lock:
            if key in self._seen:
                return False
            self._seen[key] = None
            while len(self._seen) > self.max_seen:
                self._seen.popitem(last=False)
            return True

    def handle_file(self, path: str) -> Optional[Crash]:
        if not path.endswith(self.suffix):
            return None
        device = self.device_provider()
        if device is None:
            logger.debug("No selected device, skipping %s", path)
            return None
        device_os = getattr(device, "os", "")
        if device_os and OS_IOS not in device_os:
            logger.debug("Selected device %s is not iOS, skipping %s", device.serial, path)
            return None
        key = os.path.abspath(path)
        if self._already_reported(key):
            return None

        try:
            content = read_text_limited(path, self.max_bytes)
        except OSError as e:
            logger.warning("Failed to read crash file %s: %s", path, e)
            self.reporter.event_bus.publish(
                CrashEvent(EventTypes.CRASH_FILE_ERROR, {"path": path, "error": str(e)})
            )
            return None

        if CRASH_FILE_COMPLETE_MARKER not in content:
            logger.debug("Crash file %s is still being written", path)
            return None
        if not should_show_crash_notification(device, content):
            logger.debug("Crash file %s belongs to another simulator", path)
            return None
        if not self._mark_reported(key):
            return None
        return self.reporter.report_crash(content, OS_IOS)
