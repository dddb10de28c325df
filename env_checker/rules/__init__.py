"""Rule definitions and the catalog that owns them."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from env_checker.severity import Severity

PatternLike = Union[str, re.Pattern[str], None]

_FLAG_LETTERS = (("i", re.IGNORECASE), ("m", re.MULTILINE), ("s", re.DOTALL))
_INLINE_FLAGS = re.compile(r"^\(\?[aiLmsux]+\)")


def compile_pattern(pattern: PatternLike, flags: int = 0) -> Optional[re.Pattern[str]]:
    """Compile ``pattern`` unless it is already compiled or absent.

    Raises ``re.error`` for invalid expressions so broken rules fail at construction.
    """

    if pattern is None or pattern == "":
        return None
    if isinstance(pattern, str):
        return re.compile(pattern, flags)
    return pattern


def parse_flags(letters: str | None) -> int:
    flags = 0
    for letter, flag in _FLAG_LETTERS:
        if letters and letter in letters.lower():
            flags |= flag
    return flags


def pattern_source(pattern: Optional[re.Pattern[str]]) -> Optional[str]:
    """Return the pattern text with its flags inlined, e.g. ``(?i)debug``."""

    if pattern is None:
        return None
    letters = "".join(letter for letter, flag in _FLAG_LETTERS if pattern.flags & flag)
    if letters and not _INLINE_FLAGS.match(pattern.pattern):
        return f"(?{letters}){pattern.pattern}"
    return pattern.pattern


@dataclass
class Rule:
    """Declarative detection rule.

    ``pattern`` is tested against the full trimmed line and is the only source of a
    positive match. ``key_pattern`` and ``value_pattern`` can only veto a match.
    """

    id: str
    name: str
    description: str
    severity: Severity
    pattern: PatternLike
    suggestion: str
    key_pattern: PatternLike = None
    value_pattern: PatternLike = None
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.severity, Severity):
            self.severity = Severity.parse(self.severity)
        self.pattern = compile_pattern(self.pattern)
        self.key_pattern = compile_pattern(self.key_pattern)
        self.value_pattern = compile_pattern(self.value_pattern)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "severity": self.severity.value,
            "pattern": pattern_source(self.pattern),
            "suggestion": self.suggestion,
            "enabled": self.enabled,
        }
        if self.key_pattern is not None:
            data["keyPattern"] = pattern_source(self.key_pattern)
        if self.value_pattern is not None:
            data["valuePattern"] = pattern_source(self.value_pattern)
        return data


class RuleCatalog:
    """Ordered collection of rules owned by a single scanner.

    Duplicate ids are allowed; lookups and toggles resolve to the first inserted rule.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: List[Rule] = list(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules))

    def lookup_by_id(self, rule_id: str) -> Optional[Rule]:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def all_rules(self) -> List[Rule]:
        return list(self._rules)

    def enabled_rules(self) -> List[Rule]:
        return [rule for rule in self._rules if rule.enabled]

    def add_rule(self, rule: Rule) -> None:
        self._rules.append(rule)

    def set_enabled(self, rule_id: str, enabled: bool) -> None:
        """Toggle the first rule with ``rule_id``; unknown ids are ignored.

        The entry is replaced rather than mutated so rule objects shared with
        another catalog are unaffected.
        """

        for index, rule in enumerate(self._rules):
            if rule.id == rule_id:
                self._rules[index] = replace(rule, enabled=enabled)
                return
