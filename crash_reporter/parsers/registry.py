from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

from config.constants import UNKNOWN_CRASH_REASON
from ..models import ParsedCrash
from .base import CrashLogParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """系统标签 -> 解析器（策略模式）"""

    def __init__(self, parsers: Optional[Iterable[CrashLogParser]] = None) -> None:
        self._parsers: Dict[str, CrashLogParser] = {}
        for parser in parsers or []:
            self.register(parser)

    def register(self, parser: CrashLogParser) -> CrashLogParser:
        os_tag = parser.get_os()
        if os_tag in self._parsers:
            logger.info("Replacing parser for %s with %s", os_tag, type(parser).__name__)
        self._parsers[os_tag] = parser
        return parser

    def get(self, os_tag: Optional[str]) -> Optional[CrashLogParser]:
        if not os_tag:
            return None
        return self._parsers.get(os_tag)

    def list(self) -> List[CrashLogParser]:
        return list(self._parsers.values())

    def supported_os(self) -> List[str]:
        return list(self._parsers)

    def load_builtins(self) -> "ParserRegistry":
        from .android import AndroidCrashLogParser
        from .ios import IOSCrashLogParser

        self.register(IOSCrashLogParser())
        self.register(AndroidCrashLogParser())
        return self

    def parse(self, crash_log: str, os_tag: Optional[str]) -> ParsedCrash:
        parser = self.get(os_tag)
        if parser is None:
            logger.debug("No crash log parser for OS %r", os_tag)
            return ParsedCrash(
                name=UNKNOWN_CRASH_REASON,
                reason=UNKNOWN_CRASH_REASON,
                callstack=crash_log if crash_log is not None else "",
            )
        return parser.parse(crash_log)


_default_registry: Optional[ParserRegistry] = None


def default_registry() -> ParserRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = ParserRegistry().load_builtins()
    return _default_registry


def parse_crash_log(content: str, os_tag: Optional[str], registry: Optional[ParserRegistry] = None) -> ParsedCrash:
    """从原始崩溃日志提取名称与原因。

    无法识别的内容或未知系统标签得到 "Cannot figure out the cause"
    占位结果；callstack 始终为原始日志。
    """
    return (registry or default_registry()).parse(content, os_tag)
