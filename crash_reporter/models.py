from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ParsedCrash:
    """Parser output, before a notification id is assigned."""
    name: str
    reason: str
    callstack: str


@dataclass(frozen=True)
class Crash:
    notification_id: str
    name: str
    reason: str
    callstack: str

    @classmethod
    def from_parsed(cls, notification_id: str, parsed: ParsedCrash) -> "Crash":
        return cls(
            notification_id=notification_id,
            name=parsed.name,
            reason=parsed.reason,
            callstack=parsed.callstack,
        )


@dataclass
class PersistedState:
    """某个插件键下收集的崩溃，按到达顺序。"""
    crashes: List[Crash] = field(default_factory=list)

    def with_crash(self, crash: Crash) -> "PersistedState":
        """返回追加了 ``crash`` 的新状态，``self`` 不变。"""
        return PersistedState(crashes=[*self.crashes, crash])


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    severity: str
    title: str
    action: str
