"""Render batches of scan results as JSON, HTML, console text and Markdown."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from html import escape
from typing import List, Optional, Sequence

from .result import Finding, ScanResult, Summary
from .severity import Severity

CONSOLE_BANNER = "=== ENV-CHECKER SECURITY REPORT ==="
SUGGESTION_ICON = "\U0001f4a1"
FILE_ICON = "\U0001f4c4"

HTML_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; }
        .summary { background: #f5f5f5; padding: 15px; border-radius: 5px; margin-bottom: 20px; }
        .critical { color: #d32f2f; font-weight: bold; }
        .warning { color: #f57c00; font-weight: bold; }
        .info { color: #1976d2; }
        .finding { margin: 10px 0; padding: 10px; border-left: 4px solid #ccc; }
        .finding.critical { border-left-color: #d32f2f; }
        .finding.warning { border-left-color: #f57c00; }
        .finding.info { border-left-color: #1976d2; }
        .suggestion { font-style: italic; color: #666; margin-top: 5px; }
"""


def generate_summary(results: Sequence[ScanResult]) -> Summary:
    return Summary.from_results(results)


def _timestamp(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def generate_json_report(results: Sequence[ScanResult], now: Optional[datetime] = None) -> str:
    report = {
        "timestamp": _timestamp(now),
        "summary": generate_summary(results).to_dict(),
        "results": [result.to_dict() for result in results],
    }
    return json.dumps(report, indent=2, ensure_ascii=False)


def generate_console_report(results: Sequence[ScanResult]) -> str:
    summary = generate_summary(results)
    lines: List[str] = ["", CONSOLE_BANNER, ""]
    lines.append(f"Files scanned: {summary.files_scanned}")
    lines.append(f"Total findings: {summary.total_findings}")
    lines.append(" | ".join(f"{label}: {count}" for label, count in summary.as_rows()))
    lines.append("")

    for result in results:
        if not result.findings:
            continue
        lines.append(f"{FILE_ICON} {result.file_path}")
        lines.append("=" * (len(result.file_path) + 2))
        for finding in result.findings:
            lines.append(f"{finding.severity.icon} Line {finding.line}: {finding.message}")
            lines.append(f"   Key: {finding.key}")
            lines.append(f"   {SUGGESTION_ICON} {finding.suggestion}")
            lines.append("")
    return "\n".join(lines) + "\n"


def _html_finding(finding: Finding) -> str:
    return (
        f'        <div class="finding {finding.severity.value}">\n'
        f"            <strong>Line {finding.line}:</strong> {escape(finding.message)}<br>\n"
        f"            <strong>Key:</strong> {escape(finding.key)}<br>\n"
        f'            <div class="suggestion">{SUGGESTION_ICON} {escape(finding.suggestion)}</div>\n'
        "        </div>\n"
    )


def _html_file_section(result: ScanResult) -> str:
    if not result.findings:
        return ""
    body = "".join(_html_finding(finding) for finding in result.findings)
    return f"\n    <h2>{escape(result.file_path)}</h2>\n{body}"


def generate_html_report(results: Sequence[ScanResult]) -> str:
    summary = generate_summary(results)
    sections = "".join(_html_file_section(result) for result in results)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Env-Checker Security Report</title>
    <style>{HTML_STYLE}    </style>
</head>
<body>
    <h1>Environment Security Report</h1>
    <div class="summary">
        <h2>Summary</h2>
        <p>Files scanned: {summary.files_scanned}</p>
        <p>Total findings: {summary.total_findings}</p>
        <p class="critical">Critical: {summary.critical}</p>
        <p class="warning">Warnings: {summary.warnings}</p>
        <p class="info">Info: {summary.info}</p>
    </div>
{sections}
</body>
</html>
"""


def generate_markdown_report(results: Sequence[ScanResult], now: Optional[datetime] = None) -> str:
    """Render a ``SECURITY_REPORT.md`` style document."""

    summary = generate_summary(results)
    lines: List[str] = ["# Environment Security Report", ""]
    lines.append(f"Generated: {_timestamp(now)}")
    lines.append("")
    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Count |")
    lines.append("| --- | ---: |")
    lines.append(f"| Files scanned | {summary.files_scanned} |")
    lines.append(f"| Total findings | {summary.total_findings} |")
    for label, count in summary.as_rows():
        lines.append(f"| {label} | {count} |")

    for result in results:
        if not result.findings:
            continue
        lines.append("")
        lines.append(f"## {result.file_path}")
        lines.append("")
        for finding in result.findings:
            lines.append(
                f"- {finding.severity.icon} **{_severity_label(finding.severity)}** "
                f"line {finding.line}: {finding.message} (`{finding.key}`)"
            )
            lines.append(f"  - {SUGGESTION_ICON} {finding.suggestion}")
    return "\n".join(lines) + "\n"


def _severity_label(severity: Severity) -> str:
    return severity.value.upper()


FORMATTERS = {
    "json": generate_json_report,
    "html": generate_html_report,
    "console": generate_console_report,
    "markdown": generate_markdown_report,
}


def render(results: Sequence[ScanResult], report_format: str) -> str:
    try:
        formatter = FORMATTERS[report_format]
    except KeyError:
        raise ValueError(f"Unknown report format: {report_format}") from None
    return formatter(results)
