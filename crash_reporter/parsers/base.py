from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import List

from config.constants import UNKNOWN_CRASH_REASON
from ..models import ParsedCrash
from .rules import ExtractionRule, RuleEngine

logger = logging.getLogger(__name__)


class CrashLogParser(ABC):
    """Unified parser interface, one implementation per OS tag."""

    def __init__(self) -> None:
        self._name_engine = RuleEngine(self.name_rules())
        self._reason_engine = RuleEngine(self.reason_rules())

    @abstractmethod
    def get_os(self) -> str:
        """OS tag this parser handles."""
        raise NotImplementedError

    @abstractmethod
    def name_rules(self) -> List[ExtractionRule]:
        """Rules extracting the crash name, in evaluation order."""
        raise NotImplementedError

    @abstractmethod
    def reason_rules(self) -> List[ExtractionRule]:
        """Rules extracting the crash reason, in evaluation order."""
        raise NotImplementedError

    def parse(self, crash_log: str) -> ParsedCrash:
        content = crash_log or ""
        name = self._name_engine.evaluate(content)
        reason = self._reason_engine.evaluate(content)
        if name is None:
            logger.debug("%s parser found no crash name", self.get_os())
        if reason is None:
            logger.debug("%s parser found no crash reason", self.get_os())
        return ParsedCrash(
            name=name if name is not None else UNKNOWN_CRASH_REASON,
            reason=reason if reason is not None else UNKNOWN_CRASH_REASON,
            callstack=content,
        )
