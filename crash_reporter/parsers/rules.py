from __future__ import annotations
from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable, Iterable, List, Optional

Extractor = Callable[[Match, str], Optional[str]]


@dataclass
class ExtractionRule:
    name: str
    pattern: Pattern
    extract: Extractor

    def apply(self, crash_log: str) -> Optional[str]:
        match = self.pattern.search(crash_log)
        if not match:
            return None
        return self.extract(match, crash_log) or None


class RuleEngine:
    """有序规则，第一个给出非空值的规则生效。"""

    def __init__(self, rules: Optional[Iterable[ExtractionRule]] = None):
        self._rules: List[ExtractionRule] = list(rules or [])

    def add_rule(self, rule: ExtractionRule):
        self._rules.append(rule)

    def rules(self) -> List[ExtractionRule]:
        return list(self._rules)

    def evaluate(self, crash_log: str) -> Optional[str]:
        for rule in self._rules:
            value = rule.apply(crash_log)
            if value is not None:
                return value
        return None
