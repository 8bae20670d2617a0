"""崩溃上报事件总线。

watchdog 观察线程与宿主线程都会发布事件，订阅表由锁保护，
发布时先复制处理器列表再逐个调用。
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


@dataclass
class CrashEvent:
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[CrashEvent], None]


class EventTypes:
    CRASH_REPORTED = "crash_reported"          # payload: plugin_key, crash
    CRASH_NOTIFICATION = "crash_notification"  # payload: plugin_key, notification
    CRASH_FILE_ERROR = "crash_file_error"      # payload: path, error


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: Handler) -> Callable[[], None]:
        """订阅事件，返回取消订阅的函数。"""
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type)
            if handlers and handler in handlers:
                handlers.remove(handler)

    def publish(self, event: CrashEvent) -> int:
        """依次调用处理器；失败的处理器记日志后跳过。返回成功调用的数量。"""
        with self._lock:
            handlers = list(self._subscribers.get(event.type, ()))
        delivered = 0
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed for %s", event.type)
            else:
                delivered += 1
        return delivered
