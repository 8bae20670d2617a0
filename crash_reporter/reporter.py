"""面向宿主的门面：串联解析、插件状态与通知。"""
from __future__ import annotations
import logging
import threading
from typing import Dict, List, Optional

from config.constants import CRASH_REPORT_METHOD
from .events import CrashEvent, EventBus, EventTypes
from .models import Crash, Notification, PersistedState
from .paths import should_show_crash_notification
from .plugin import CrashPayload, CrashReporterPlugin, get_new_persisted_state_from_crash_log
from .plugin_utils import get_persisted_state, get_plugin_key

logger = logging.getLogger(__name__)

_SELECTED = object()


class CrashReporter:
    """按插件键保存崩溃状态，并告知宿主何时通知。

    ``device`` / ``selected_app`` 参数默认取 :meth:`select` 设置的当前选择；
    显式传入 ``None`` 对应 "unknown" 键。
    """

    def __init__(self, plugin: Optional[CrashReporterPlugin] = None, event_bus: Optional[EventBus] = None) -> None:
        self.plugin = plugin or CrashReporterPlugin()
        self.event_bus = event_bus or EventBus()
        self.plugin_states: Dict[str, PersistedState] = {}
        self.selected_device = None
        self.selected_app: Optional[str] = None
        self._lock = threading.RLock()

    def select(self, device=None, selected_app: Optional[str] = None) -> None:
        with self._lock:
            self.selected_device = device
            self.selected_app = selected_app

    def _resolve(self, device, selected_app):
        if device is _SELECTED:
            device = self.selected_device
        if selected_app is _SELECTED:
            selected_app = self.selected_app
        return device, selected_app

    def plugin_key(self, device=_SELECTED, selected_app=_SELECTED) -> str:
        device, selected_app = self._resolve(device, selected_app)
        return get_plugin_key(selected_app, device, self.plugin.id)

    def get_state(self, device=_SELECTED, selected_app=_SELECTED) -> PersistedState:
        key = self.plugin_key(device, selected_app)
        with self._lock:
            return get_persisted_state(key, self.plugin, self.plugin_states)

    def get_notifications(self, device=_SELECTED, selected_app=_SELECTED) -> List[Notification]:
        return self.plugin.get_active_notifications(self.get_state(device, selected_app))

    def report_crash(
        self,
        content: str,
        os_tag: Optional[str],
        device=_SELECTED,
        selected_app=_SELECTED,
    ) -> Optional[Crash]:
        """记录原始崩溃日志，返回新崩溃；缺少系统标签时返回 None。"""
        device, selected_app = self._resolve(device, selected_app)
        key = get_plugin_key(selected_app, device, self.plugin.id)
        with self._lock:
            current = get_persisted_state(key, self.plugin, self.plugin_states)
            new_state = get_new_persisted_state_from_crash_log(current, self.plugin, content, os_tag)
            if new_state is None:
                logger.warning("Dropping crash log for %s: no OS tag", key)
                return None
            self.plugin_states[key] = new_state
            crash = new_state.crashes[-1]
            notify = should_show_crash_notification(self.selected_device, content)
        self._announce(key, crash, notify)
        return crash

    def receive_message(
        self,
        method: str,
        payload: CrashPayload,
        device=_SELECTED,
        selected_app=_SELECTED,
    ) -> Optional[Crash]:
        """处理应用客户端发来的消息（已解析的崩溃）。"""
        device, selected_app = self._resolve(device, selected_app)
        key = get_plugin_key(selected_app, device, self.plugin.id)
        with self._lock:
            current = get_persisted_state(key, self.plugin, self.plugin_states)
            new_state = self.plugin.persisted_state_reducer(current, method, payload)
            if new_state is current:
                logger.debug("Ignoring %s message for %s", method, key)
                return None
            self.plugin_states[key] = new_state
            crash = new_state.crashes[-1]
        # 来自已连接应用自身，无需路径校验
        self._announce(key, crash, method == CRASH_REPORT_METHOD)
        return crash

    def _announce(self, key: str, crash: Crash, notify: bool) -> None:
        self.event_bus.publish(CrashEvent(EventTypes.CRASH_REPORTED, {"plugin_key": key, "crash": crash}))
        if not notify:
            return
        notification = self.plugin.get_active_notifications(PersistedState(crashes=[crash]))[0]
        logger.info("Showing crash notification %s: %s", notification.id, notification.title)
        self.event_bus.publish(
            CrashEvent(EventTypes.CRASH_NOTIFICATION, {"plugin_key": key, "notification": notification})
        )
