"""Suggested edits for offending lines."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from .parser import split_lines
from .severity import Severity

if TYPE_CHECKING:
    from .result import Finding
    from .rules import Rule

MASK_TOKEN = "***MASKED***"
COMMENT_LABELS = {
    Severity.CRITICAL: "SECURITY",
    Severity.WARNING: "WARNING",
    Severity.INFO: "INFO",
}


class QuickFixType(str, Enum):
    COMMENT = "comment"
    MASK = "mask"
    REMOVE = "remove"


@dataclass(frozen=True)
class QuickFix:
    """A literal replacement for the offending line, tagged by strategy."""

    type: QuickFixType
    replacement: str

    def to_dict(self) -> Dict[str, str]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


def comment_fix(full_line: str, label: str, suggestion: str) -> QuickFix:
    return QuickFix(QuickFixType.COMMENT, f"# {full_line} # {label}: {suggestion}")


def mask_fix(key: str) -> QuickFix:
    return QuickFix(QuickFixType.MASK, f"{key}={MASK_TOKEN}")


def removal_fix() -> QuickFix:
    """Drop the line entirely. Only bulk operations choose this strategy."""

    return QuickFix(QuickFixType.REMOVE, "")


def build_quick_fix(severity: Severity, suggestion: str, key: str, full_line: str) -> QuickFix:
    """Map a severity onto its remediation strategy.

    CRITICAL lines are commented out with a SECURITY note, WARNING values are
    masked, and anything else is commented out with an INFO note.
    """

    if severity is Severity.CRITICAL:
        return comment_fix(full_line, "SECURITY", suggestion)
    if severity is Severity.WARNING:
        return mask_fix(key)
    return comment_fix(full_line, "INFO", suggestion)


def quick_fix_for_rule(rule: "Rule", key: str, full_line: str) -> QuickFix:
    return build_quick_fix(rule.severity, rule.suggestion, key, full_line)


def apply_fixes(
    content: str,
    findings: Iterable["Finding"],
    strategy: Optional[QuickFixType] = None,
) -> str:
    """Rewrite ``content`` with one fix per offending line.

    The first finding on a line decides its replacement. With ``strategy`` set to
    ``REMOVE`` offending lines are deleted; ``COMMENT`` and ``MASK`` force that
    strategy for every finding regardless of severity.
    """

    by_line: Dict[int, "Finding"] = {}
    for finding in findings:
        by_line.setdefault(finding.line, finding)

    output: List[str] = []
    for index, line in enumerate(split_lines(content), start=1):
        finding = by_line.get(index)
        if finding is None:
            output.append(line)
            continue
        fix = _select_fix(finding, line.strip(), strategy)
        if fix.type is QuickFixType.REMOVE:
            continue
        output.append(fix.replacement)
    return "\n".join(output)


def _select_fix(finding: "Finding", full_line: str, strategy: Optional[QuickFixType]) -> QuickFix:
    if strategy is QuickFixType.REMOVE:
        return removal_fix()
    if strategy is QuickFixType.MASK:
        return mask_fix(finding.key)
    if strategy is QuickFixType.COMMENT:
        return comment_fix(full_line, COMMENT_LABELS[finding.severity], finding.suggestion)
    if finding.quick_fix is not None:
        return finding.quick_fix
    return build_quick_fix(finding.severity, finding.suggestion, finding.key, full_line)
