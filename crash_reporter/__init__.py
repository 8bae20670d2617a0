"""设备调试器崩溃上报插件：崩溃日志接入。

把 iOS / Android 崩溃日志解析为名称与原因，按设备或应用累积，
并决定宿主何时弹出通知。
"""
from .device import BaseDevice
from .models import Crash, Notification, ParsedCrash, PersistedState
from .parsers import parse_crash_log
from .paths import parse_path, should_show_crash_notification
from .plugin import CrashReporterPlugin, get_new_persisted_state_from_crash_log
from .plugin_utils import get_persisted_state, get_plugin_key
from .reporter import CrashReporter

__all__ = [
    "BaseDevice",
    "Crash",
    "Notification",
    "ParsedCrash",
    "PersistedState",
    "parse_crash_log",
    "parse_path",
    "should_show_crash_notification",
    "CrashReporterPlugin",
    "get_new_persisted_state_from_crash_log",
    "get_persisted_state",
    "get_plugin_key",
    "CrashReporter",
]
