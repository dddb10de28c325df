import pytest

from env_checker.engine import EnvScanner
from env_checker.remediation import QuickFixType, apply_fixes, build_quick_fix, removal_fix
from env_checker.severity import Severity

CONTENT = "DB_HOST=db\nDB_PASSWORD=123456\nDEBUG=true\nAPI_URL=http://localhost:3000"
PASSWORD_SUGGESTION = "Remove hardcoded password and use secure environment variable injection"


@pytest.mark.parametrize(
    "severity, expected_type, expected_replacement",
    [
        (Severity.CRITICAL, QuickFixType.COMMENT, "# TOKEN=abc # SECURITY: Rotate it"),
        (Severity.WARNING, QuickFixType.MASK, "TOKEN=***MASKED***"),
        (Severity.INFO, QuickFixType.COMMENT, "# TOKEN=abc # INFO: Rotate it"),
    ],
)
def test_build_quick_fix_per_severity(severity, expected_type, expected_replacement):
    fix = build_quick_fix(severity, "Rotate it", "TOKEN", "TOKEN=abc")

    assert fix.type is expected_type
    assert fix.replacement == expected_replacement


def test_removal_fix_is_empty():
    fix = removal_fix()

    assert fix.type is QuickFixType.REMOVE
    assert fix.to_dict() == {"type": "remove", "replacement": ""}


def test_apply_fixes_uses_first_finding_per_line():
    result = EnvScanner().scan_content(CONTENT)

    fixed = apply_fixes(CONTENT, result.findings)

    assert fixed.split("\n") == [
        "DB_HOST=db",
        f"# DB_PASSWORD=123456 # SECURITY: {PASSWORD_SUGGESTION}",
        "DEBUG=***MASKED***",
        "# API_URL=http://localhost:3000 # INFO: "
        "Replace with production URL or use environment-specific configuration",
    ]


def test_apply_fixes_remove_strategy_drops_lines():
    result = EnvScanner().scan_content(CONTENT)

    assert apply_fixes(CONTENT, result.findings, QuickFixType.REMOVE) == "DB_HOST=db"


def test_apply_fixes_mask_strategy():
    result = EnvScanner().scan_content(CONTENT)

    fixed = apply_fixes(CONTENT, result.findings, QuickFixType.MASK)

    assert fixed.split("\n") == [
        "DB_HOST=db",
        "DB_PASSWORD=***MASKED***",
        "DEBUG=***MASKED***",
        "API_URL=***MASKED***",
    ]


def test_apply_fixes_without_findings_is_identity():
    assert apply_fixes("A=1\n\n# note\n", []) == "A=1\n\n# note\n"


def test_fixed_content_rescans_clean_for_critical():
    scanner = EnvScanner()
    fixed = apply_fixes(CONTENT, scanner.scan_content(CONTENT).findings)

    assert scanner.scan_content(fixed).critical_count == 0


def test_apply_fixes_comment_strategy_labels_by_severity():
    result = EnvScanner().scan_content(CONTENT)

    fixed = apply_fixes(CONTENT, result.findings, QuickFixType.COMMENT).split("\n")

    assert fixed[1] == f"# DB_PASSWORD=123456 # SECURITY: {PASSWORD_SUGGESTION}"
    assert fixed[2] == (
        "# DEBUG=true # WARNING: Set DEBUG=false or remove for production environments"
    )
    assert fixed[3].startswith("# API_URL=http://localhost:3000 # INFO: ")
