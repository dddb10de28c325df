"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .remediation import QuickFix
from .severity import SEVERITY_ORDER, Severity


@dataclass(frozen=True)
class Finding:
    """One rule matching one line of a scanned document."""

    line: int
    key: str
    value: str
    severity: Severity
    rule_id: str
    message: str
    suggestion: str
    quick_fix: Optional[QuickFix] = None
    column: int = 1

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "line": self.line,
            "column": self.column,
            "key": self.key,
            "value": self.value,
            "severity": self.severity.value,
            "ruleId": self.rule_id,
            "message": self.message,
            "suggestion": self.suggestion,
        }
        if self.quick_fix is not None:
            data["quickFix"] = self.quick_fix.to_dict()
        return data


def count_by_severity(findings: Iterable[Finding]) -> Dict[Severity, int]:
    counts = {severity: 0 for severity in SEVERITY_ORDER}
    for finding in findings:
        counts[finding.severity] += 1
    return counts


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one document.

    Findings are in line order, then rule order within a line. The severity
    counters must agree with the findings; construct through ``aggregate``.
    """

    file_path: str
    findings: Tuple[Finding, ...]
    total_lines: int
    critical_count: int
    warning_count: int
    info_count: int
    scanned_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        counts = count_by_severity(self.findings)
        expected = (counts[Severity.CRITICAL], counts[Severity.WARNING], counts[Severity.INFO])
        actual = (self.critical_count, self.warning_count, self.info_count)
        if expected != actual:
            raise ValueError(f"Severity counters {actual} do not match findings {expected}")

    def count(self, severity: Severity) -> int:
        return {
            Severity.CRITICAL: self.critical_count,
            Severity.WARNING: self.warning_count,
            Severity.INFO: self.info_count,
        }[severity]

    @property
    def highest_severity(self) -> Optional[Severity]:
        for severity in SEVERITY_ORDER:
            if self.count(severity):
                return severity
        return None

    def findings_for_rule(self, rule_id: str) -> List[Finding]:
        return [finding for finding in self.findings if finding.rule_id == rule_id]

    def to_dict(self) -> Dict[str, object]:
        return {
            "filePath": self.file_path,
            "findings": [finding.to_dict() for finding in self.findings],
            "scannedAt": self.scanned_at.isoformat(),
            "totalLines": self.total_lines,
            "criticalCount": self.critical_count,
            "warningCount": self.warning_count,
            "infoCount": self.info_count,
        }


def aggregate(file_path: str, findings: Sequence[Finding], total_lines: int) -> ScanResult:
    """Count findings by severity and stamp a creation time."""

    counts = count_by_severity(findings)
    return ScanResult(
        file_path=file_path,
        findings=tuple(findings),
        total_lines=total_lines,
        critical_count=counts[Severity.CRITICAL],
        warning_count=counts[Severity.WARNING],
        info_count=counts[Severity.INFO],
    )


@dataclass
class Summary:
    """Aggregate counts across a batch of scan results."""

    files_scanned: int = 0
    total_findings: int = 0
    critical: int = 0
    warnings: int = 0
    info: int = 0

    def add_result(self, result: ScanResult) -> None:
        self.files_scanned += 1
        self.total_findings += len(result.findings)
        self.critical += result.critical_count
        self.warnings += result.warning_count
        self.info += result.info_count

    def to_dict(self) -> Dict[str, int]:
        return {
            "filesScanned": self.files_scanned,
            "totalFindings": self.total_findings,
            "critical": self.critical,
            "warnings": self.warnings,
            "info": self.info,
        }

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [("Critical", self.critical), ("Warnings", self.warnings), ("Info", self.info)]

    @classmethod
    def from_results(cls, results: Iterable[ScanResult]) -> "Summary":
        summary = cls()
        for result in results:
            summary.add_result(result)
        return summary
