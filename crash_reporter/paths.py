"""从 Apple 崩溃报告提取 Path，并据此判断是否弹出通知。"""
from __future__ import annotations
import logging
from typing import Optional

from config.constants import RE_PATH_LINE

logger = logging.getLogger(__name__)


def parse_path(content: str) -> Optional[str]:
    """返回第一行 ``Path:`` 的值（不做解码），去掉首尾空白。

    ``Path:  path/to/simulator/<UDID>/App Name.app/App Name`` 得到
    ``path/to/simulator/<UDID>/App Name.app/App Name``.
    """
    match = RE_PATH_LINE.search(content or "")
    if not match:
        return None
    path = match.group(1).strip()
    return path or None


def should_show_crash_notification(device, content: str) -> bool:
    """崩溃日志的路径属于 ``device`` 时返回 True。

    serial 必须等于路径中完整的一段（以 ``/`` 分隔），仅前缀相同的
    模拟器 id 不算匹配。
    """
    if not device:
        return False
    app_path = parse_path(content)
    if not app_path:
        return False
    serial = getattr(device, "serial", None)
    if not serial:
        return False
    matched = serial in app_path.split("/")
    if not matched:
        logger.debug("Crash path %s does not belong to device %s", app_path, serial)
    return matched
