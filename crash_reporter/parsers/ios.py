from __future__ import annotations

from typing import List

from config.constants import OS_IOS, RE_IOS_EXCEPTION_TYPE
from .base import CrashLogParser
from .rules import ExtractionRule


def _exception_type(match, crash_log):
    return match.group(1)


EXCEPTION_TYPE_RULE = ExtractionRule(
    name="exception_type",
    pattern=RE_IOS_EXCEPTION_TYPE,
    extract=_exception_type,
)


class IOSCrashLogParser(CrashLogParser):
    """Apple 崩溃报告：由 ``Exception Type:  EXC_BAD_ACCESS (SIGSEGV)`` 命名。

    只取第一个关键字后紧跟的 ASCII 单词，上例的名称与原因都是
    ``EXC_BAD_ACCESS``。
    """

    def get_os(self) -> str:
        return OS_IOS

    def name_rules(self) -> List[ExtractionRule]:
        return [EXCEPTION_TYPE_RULE]

    def reason_rules(self) -> List[ExtractionRule]:
        return [EXCEPTION_TYPE_RULE]
