from __future__ import annotations

from typing import List

from config.constants import OS_ANDROID, RE_ANDROID_FIRST_LINE, RE_ANDROID_FRAME
from .base import CrashLogParser
from .rules import ExtractionRule


def _first_line(match, crash_log):
    return match.group(1).rstrip("\r")


def _line_before_first_frame(match, crash_log):
    # 第一帧之前最后一个非空行即异常行，例如
    # "java.lang.IndexOutOfBoundsException: Index: 190, Size: 0"
    head = crash_log[: match.start()]
    lines = [line.strip() for line in head.splitlines() if line.strip()]
    return lines[-1] if lines else None


class AndroidCrashLogParser(CrashLogParser):
    """运行时打印的 Java 崩溃::

        FATAL EXCEPTION: main
        Process: com.example, PID: 27026
        java.lang.IndexOutOfBoundsException: Index: 190, Size: 0
            at java.util.ArrayList.get(ArrayList.java:437)

    The first line names the crash; the line right before the first
    ``at`` frame is the reason. Name extraction only needs a line break,
    so a log without frames still gets a name but no reason.
    """

    def get_os(self) -> str:
        return OS_ANDROID

    def name_rules(self) -> List[ExtractionRule]:
        return [ExtractionRule(name="first_line", pattern=RE_ANDROID_FIRST_LINE, extract=_first_line)]

    def reason_rules(self) -> List[ExtractionRule]:
        return [ExtractionRule(name="exception_line", pattern=RE_ANDROID_FRAME, extract=_line_before_first_frame)]
