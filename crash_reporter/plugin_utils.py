from __future__ import annotations
from typing import Mapping, Optional

from config.constants import PLUGIN_KEY_SEPARATOR, UNKNOWN_KEY_PART
from .models import PersistedState


def get_plugin_key(selected_app: Optional[str], device, plugin_id: str) -> str:
    """插件状态的归属键：优先所选应用，其次设备 serial，否则 "unknown"。"""
    if selected_app:
        part = selected_app
    elif device:
        part = device.serial
    else:
        part = UNKNOWN_KEY_PART
    return f"{part}{PLUGIN_KEY_SEPARATOR}{plugin_id}"


def get_persisted_state(
    plugin_key: str,
    plugin,
    plugin_states: Mapping[str, PersistedState],
) -> Optional[PersistedState]:
    """``plugin_key`` 已存的状态，没有则返回插件默认状态。"""
    if plugin is None:
        return None
    state = plugin_states.get(plugin_key)
    if state is None:
        return plugin.default_persisted_state
    return state
