"""Command-line entry point for env-checker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

import yaml

from .config import PROFILE_DIRECTORY, ScannerConfig, build_rules, load_rule_file
from .engine import EnvScanner
from .errors import EnvCheckerError
from .remediation import QuickFixType, apply_fixes
from .report import FORMATTERS, generate_console_report, render
from .result import ScanResult
from .severity import Severity
from .utils import iter_env_files, read_text_file, write_text_file

logger = logging.getLogger(__name__)

DEFAULT_PATHS = (".",)
DEFAULT_SETTINGS_FILE = ".env-checker.settings.yaml"
EXIT_CONFIG_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="env-checker",
        description="Scan environment files for hardcoded secrets and unsafe settings",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Environment files or directories to scan (defaults to the current directory).",
    )
    parser.add_argument(
        "--format",
        choices=sorted(FORMATTERS),
        default="json",
        help="Report format for file output (defaults to json).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Path to write the report (e.g., artifacts/env-report.json).",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help=f"YAML/JSON settings file (defaults to {DEFAULT_SETTINGS_FILE} when present).",
    )
    parser.add_argument("--rules", dest="rules_path", default=None, help="Additional rule document.")
    parser.add_argument("--profile", default=None, help=f"Rule profile name under {PROFILE_DIRECTORY}.")
    parser.add_argument(
        "--disable",
        dest="disabled_rules",
        action="append",
        default=[],
        metavar="RULE_ID",
        help="Disable a rule by id (repeatable).",
    )
    parser.add_argument(
        "--severity",
        dest="severities",
        action="append",
        choices=[severity.value for severity in Severity],
        help="Only report these severities (repeatable).",
    )
    parser.add_argument(
        "--exclude",
        dest="exclude_patterns",
        action="append",
        default=None,
        metavar="GLOB",
        help="Glob of paths to skip when walking directories (repeatable).",
    )
    parser.add_argument(
        "--fix",
        nargs="?",
        const="auto",
        choices=["auto", "comment", "mask", "remove"],
        default=None,
        help="Rewrite files in place with suggested fixes.",
    )
    parser.add_argument(
        "--fail-on",
        choices=["critical", "warning", "info", "none"],
        default="warning",
        help="Lowest severity that produces a non-zero exit code.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def load_config(args: argparse.Namespace) -> ScannerConfig:
    settings_path = Path(args.settings or DEFAULT_SETTINGS_FILE)
    if args.settings and not settings_path.exists():
        raise EnvCheckerError(f"Settings file not found: {settings_path}")
    config = ScannerConfig.from_file(settings_path)
    if args.severities:
        config.enabled_severities = list(args.severities)
    if args.exclude_patterns:
        config.exclude_patterns = list(args.exclude_patterns)
    if args.profile:
        config.rule_profile = args.profile
    errors = config.validate()
    if errors:
        raise EnvCheckerError("Invalid settings: " + "; ".join(errors))
    return config


def build_scanner(args: argparse.Namespace, config: ScannerConfig, paths: Sequence[str]) -> EnvScanner:
    rules = build_rules(config, roots=paths, profile_dir=Path(PROFILE_DIRECTORY))
    if args.rules_path:
        rules_path = Path(args.rules_path)
        if not rules_path.exists():
            raise EnvCheckerError(f"Rules file not found: {rules_path}")
        rules.extend(load_rule_file(rules_path))
    scanner = EnvScanner(rules, config=config)
    for rule_id in args.disabled_rules:
        if scanner.get_rule(rule_id) is None:
            logger.warning("Unknown rule id %s; nothing to disable", rule_id)
        scanner.toggle_rule(rule_id, False)
    return scanner


def run_scan(scanner: EnvScanner, config: ScannerConfig, paths: Sequence[str], fix: str | None = None) -> List[ScanResult]:
    results: List[ScanResult] = []
    for path in iter_env_files(paths, config.exclude_patterns, config.max_file_size_kb):
        content = read_text_file(path)
        result = scanner.scan_content(content, str(path))
        results.append(result)
        if fix and result.findings:
            strategy = None if fix == "auto" else QuickFixType(fix)
            write_text_file(path, apply_fixes(content, result.findings, strategy))
            logger.info("Applied %d fixes to %s", len(result.findings), path)
    return results


def notify(results: Sequence[ScanResult], config: ScannerConfig) -> None:
    """Write a stderr notice for each file with findings at or above the notification level."""

    for result in results:
        urgent = [finding for finding in result.findings if config.should_notify(finding.severity)]
        if urgent:
            worst = max(urgent, key=lambda finding: finding.severity.rank).severity
            sys.stderr.write(
                f"env-checker: {result.file_path}: {len(urgent)} finding(s) at or above "
                f"{config.notification_level} (worst: {worst.value})\n"
            )


def write_output(results: Sequence[ScanResult], output_path: str | None, report_format: str) -> None:
    print(generate_console_report(results))
    if not output_path:
        return
    write_text_file(Path(output_path), render(results, report_format))
    print(f"Report written to {output_path}")


def exit_code(results: Sequence[ScanResult], fail_on: str) -> int:
    if fail_on == "none":
        return 0
    threshold = Severity.parse(fail_on).rank
    highest = max(
        (result.highest_severity.rank for result in results if result.highest_severity is not None),
        default=None,
    )
    if highest is None or highest < threshold:
        return 0
    return 2 if highest >= Severity.CRITICAL.rank else 1


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    paths = args.paths or list(DEFAULT_PATHS)
    try:
        config = load_config(args)
        scanner = build_scanner(args, config, paths)
        results = run_scan(scanner, config, paths, fix=args.fix)
    except (EnvCheckerError, OSError, ValueError, yaml.YAMLError) as exc:
        sys.stderr.write(f"env-checker: {exc}\n")
        return EXIT_CONFIG_ERROR
    notify(results, config)
    write_output(results, args.output_path, args.format)
    return exit_code(results, args.fail_on)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
