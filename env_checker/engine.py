"""Scanning engine: match parsed lines against the rule catalog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional

from .parser import ParsedLine, parse_content, split_lines
from .remediation import quick_fix_for_rule
from .result import Finding, ScanResult, aggregate
from .rules import Rule, RuleCatalog
from .rules.builtin import default_rules
from .utils import read_text_file

if TYPE_CHECKING:
    from .config import ScannerConfig

logger = logging.getLogger(__name__)

DEFAULT_FILE_PATH = ".env"


def rule_matches(rule: Rule, key: str, value: str, full_line: str) -> bool:
    """Return whether ``rule`` flags the line.

    Only the line pattern can produce a match. Key and value patterns, when
    present, can only reject it; a rule without a line pattern never matches.
    """

    matches = False
    if rule.pattern is not None and rule.pattern.search(full_line):
        matches = True
    if rule.key_pattern is not None and not rule.key_pattern.search(key):
        matches = False
    if rule.value_pattern is not None and not rule.value_pattern.search(value):
        matches = False
    return matches


def apply_rule(rule: Rule, key: str, value: str, line_number: int, full_line: str) -> Optional[Finding]:
    if not rule_matches(rule, key, value, full_line):
        return None
    return Finding(
        line=line_number,
        key=key,
        value=value,
        severity=rule.severity,
        rule_id=rule.id,
        message=f"{rule.name}: {rule.description}",
        suggestion=rule.suggestion,
        quick_fix=quick_fix_for_rule(rule, key, full_line),
    )


def match_line(parsed: ParsedLine, rules: Iterable[Rule]) -> List[Finding]:
    """Evaluate every rule against one line, in catalog order."""

    findings: List[Finding] = []
    for rule in rules:
        finding = apply_rule(rule, parsed.key, parsed.value, parsed.line_number, parsed.full_line)
        if finding is not None:
            findings.append(finding)
    return findings


class EnvScanner:
    """Scan environment file content against a catalog owned by this instance."""

    def __init__(
        self,
        custom_rules: Optional[Iterable[Rule]] = None,
        config: Optional["ScannerConfig"] = None,
    ) -> None:
        rules = list(custom_rules) if custom_rules is not None else default_rules()
        self.catalog = RuleCatalog(rules)
        self.config = config

    def scan_content(self, content: str, file_path: str = DEFAULT_FILE_PATH) -> ScanResult:
        total_lines = len(split_lines(content))
        rules = self.catalog.enabled_rules()
        findings: List[Finding] = []
        for parsed in parse_content(content):
            findings.extend(match_line(parsed, rules))

        if self.config is not None:
            findings = [f for f in findings if self.config.shows_severity(f.severity)]

        logger.debug("Scanned %s: %d lines, %d findings", file_path, total_lines, len(findings))
        return aggregate(file_path, findings, total_lines)

    def scan_file(self, path: Path) -> ScanResult:
        """Read ``path`` and scan it. IO errors propagate to the caller."""

        return self.scan_content(read_text_file(path), str(path))

    # ------------------------------------------------------------------
    # Rule management
    # ------------------------------------------------------------------
    def add_rule(self, rule: Rule) -> None:
        self.catalog.add_rule(rule)

    def get_rules(self) -> List[Rule]:
        return self.catalog.all_rules()

    def get_rule(self, rule_id: str) -> Optional[Rule]:
        return self.catalog.lookup_by_id(rule_id)

    def toggle_rule(self, rule_id: str, enabled: bool) -> None:
        self.catalog.set_enabled(rule_id, enabled)
