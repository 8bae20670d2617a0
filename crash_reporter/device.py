from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class BaseDevice:
    """最小设备描述，崩溃上报只关心 ``serial``。"""
    serial: str
    device_type: str = "emulator"
    title: str = ""
    os: str = ""
