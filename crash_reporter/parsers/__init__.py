from .base import CrashLogParser
from .rules import ExtractionRule, RuleEngine
from .ios import IOSCrashLogParser
from .android import AndroidCrashLogParser
from .registry import ParserRegistry, default_registry, parse_crash_log

__all__ = [
    "CrashLogParser",
    "ExtractionRule",
    "RuleEngine",
    "IOSCrashLogParser",
    "AndroidCrashLogParser",
    "ParserRegistry",
    "default_registry",
    "parse_crash_log",
]
