"""崩溃上报插件描述对象。

通知计数器、默认持久化状态与插件 id 都挂在实例上，
每个宿主会话（以及每个测试）各用一个实例。
"""
from __future__ import annotations
import logging
import threading
from typing import Any, List, Mapping, Optional, Union

from config.constants import (
    CRASH_REPORT_METHOD,
    NOTIFICATION_SEVERITY,
    NOTIFICATION_TITLE_PREFIX,
    PLUGIN_ID,
    UNKNOWN_CRASH_REASON,
)
from .models import Crash, Notification, ParsedCrash, PersistedState
from .parsers import ParserRegistry, parse_crash_log

logger = logging.getLogger(__name__)

CrashPayload = Union[ParsedCrash, Mapping[str, Any]]


def _to_parsed_crash(payload: CrashPayload) -> ParsedCrash:
    if isinstance(payload, ParsedCrash):
        return payload
    return ParsedCrash(
        name=str(payload.get("name") or UNKNOWN_CRASH_REASON),
        reason=str(payload.get("reason") or UNKNOWN_CRASH_REASON),
        callstack=str(payload.get("callstack") or ""),
    )


class CrashReporterPlugin:
    def __init__(
        self,
        plugin_id: str = PLUGIN_ID,
        default_persisted_state: Optional[PersistedState] = None,
        registry: Optional[ParserRegistry] = None,
    ) -> None:
        self.id = plugin_id
        self.default_persisted_state = default_persisted_state or PersistedState()
        self.notification_id = 0
        self.registry = registry
        self._lock = threading.RLock()

    def next_notification_id(self) -> str:
        """计数器先加一再返回，会话中第一个崩溃得到 "1"。"""
        with self._lock:
            self.notification_id += 1
            return str(self.notification_id)

    def reset(self) -> None:
        with self._lock:
            self.notification_id = 0
            self.default_persisted_state = PersistedState()

    def parse_crash_log(self, content: str, os_tag: Optional[str]) -> ParsedCrash:
        return parse_crash_log(content, os_tag, registry=self.registry)

    def persisted_state_reducer(
        self,
        persisted_state: PersistedState,
        method: str,
        payload: CrashPayload,
    ) -> PersistedState:
        """把设备消息应用到状态上，只有 ``crash-report`` 会改变状态。"""
        if method != CRASH_REPORT_METHOD:
            return persisted_state
        crash = Crash.from_parsed(self.next_notification_id(), _to_parsed_crash(payload))
        logger.info("Crash %s recorded: %s", crash.notification_id, crash.name)
        return persisted_state.with_crash(crash)

    @staticmethod
    def get_active_notifications(persisted_state: PersistedState) -> List[Notification]:
        return [
            Notification(
                id=crash.notification_id,
                message=crash.callstack,
                severity=NOTIFICATION_SEVERITY,
                title=f"{NOTIFICATION_TITLE_PREFIX}{crash.name} {crash.reason}",
                action=crash.notification_id,
            )
            for crash in persisted_state.crashes
        ]


def get_new_persisted_state_from_crash_log(
    persisted_state: PersistedState,
    plugin: Optional[CrashReporterPlugin],
    content: str,
    os_tag: Optional[str] = None,
) -> Optional[PersistedState]:
    """解析 ``content`` 并追加到 ``persisted_state``。

    缺少系统标签时返回 None，且不消耗通知编号。
    """
    if not os_tag or plugin is None:
        return None
    crash = plugin.parse_crash_log(content, os_tag)
    return plugin.persisted_state_reducer(persisted_state, CRASH_REPORT_METHOD, crash)
