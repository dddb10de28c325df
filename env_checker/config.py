"""Scanner settings and loading of user-supplied rule documents."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import yaml

from .errors import RuleDefinitionError
from .rules import Rule, compile_pattern, parse_flags
from .rules.builtin import default_rules
from .severity import SEVERITY_ORDER, Severity
from .utils import read_structured_file, write_text_file
from .utils.discovery import DEFAULT_EXCLUDE_PATTERNS

logger = logging.getLogger(__name__)

REQUIRED_RULE_FIELDS = ("id", "name", "description", "severity", "pattern", "suggestion")
WORKSPACE_RULE_FILES = (".env-checker.json", ".env-checker.yaml", ".env-checker.yml")
PROFILE_DIRECTORY = ".env-checker/profiles"
NOTIFY_NONE = "none"
MAX_FILE_SIZE_RANGE = (1, 10240)

_SETTING_ALIASES = {
    "enabledSeverities": "enabled_severities",
    "customRulesPath": "custom_rules_path",
    "excludePatterns": "exclude_patterns",
    "notificationLevel": "notification_level",
    "maxFileSizeKB": "max_file_size_kb",
    "ruleProfiles": "rule_profile",
    "ruleProfile": "rule_profile",
    "workspaceSpecificRules": "workspace_specific_rules",
}


@dataclass
class ScannerConfig:
    """Settings consumed by the scanner and CLI."""

    enabled_severities: List[str] = field(default_factory=lambda: [s.value for s in SEVERITY_ORDER])
    custom_rules_path: str = ""
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    notification_level: str = Severity.CRITICAL.value
    max_file_size_kb: int = 1024
    rule_profile: str = "default"
    workspace_specific_rules: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScannerConfig":
        known = set(cls.__dataclass_fields__)
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _SETTING_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                logger.warning("Ignoring unknown setting %r", key)
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Path) -> "ScannerConfig":
        data = read_structured_file(path)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Settings at {path} are not a mapping")
        return cls.from_dict(data)

    def validate(self) -> List[str]:
        """Return a list of problems; empty when the settings are usable."""

        errors: List[str] = []
        valid = {severity.value for severity in SEVERITY_ORDER}
        if not isinstance(self.enabled_severities, (list, tuple)):
            errors.append("Enabled severities must be a list")
        else:
            for severity in self.enabled_severities:
                if _severity_text(severity) not in valid:
                    errors.append(f"Invalid severity level: {severity}")
        if not isinstance(self.exclude_patterns, (list, tuple)):
            errors.append("Exclude patterns must be a list")
        if not isinstance(self.custom_rules_path, str):
            errors.append("Custom rules path must be a string")
        if not isinstance(self.rule_profile, str):
            errors.append("Rule profile must be a string")
        level = _severity_text(self.notification_level)
        if level != NOTIFY_NONE and level not in valid:
            errors.append(f"Invalid notification level: {self.notification_level}")
        low, high = MAX_FILE_SIZE_RANGE
        if not isinstance(self.max_file_size_kb, int) or isinstance(self.max_file_size_kb, bool):
            errors.append("Max file size must be an integer")
        elif not low <= self.max_file_size_kb <= high:
            errors.append("Max file size must be between 1KB and 10MB")
        return errors

    def shows_severity(self, severity: Severity) -> bool:
        return severity.value in {_severity_text(s) for s in self.enabled_severities}

    def should_notify(self, severity: Severity) -> bool:
        level = _severity_text(self.notification_level)
        if level == NOTIFY_NONE:
            return False
        return severity.rank >= Severity.parse(level).rank


def _severity_text(value: Any) -> str:
    if isinstance(value, Severity):
        return value.value
    return str(value).strip().lower()


# ----------------------------------------------------------------------
# Rule documents
# ----------------------------------------------------------------------
def _field(rule: Mapping[str, Any], camel: str, snake: str) -> Any:
    return rule.get(camel, rule.get(snake))


def _check_pattern(errors: List[str], label: str, pattern: Any, flags: int) -> None:
    if pattern is None:
        return
    if not isinstance(pattern, str):
        errors.append(f"{label} must be a string")
        return
    try:
        re.compile(pattern, flags)
    except re.error as exc:
        errors.append(f"{label} is not a valid regular expression ({exc})")


def validate_rule(rule: Any, index: int = 0) -> List[str]:
    if not isinstance(rule, Mapping):
        return [f"rule #{index + 1}: must be a mapping"]
    label = f"rule {rule.get('id') or '#' + str(index + 1)}"
    errors: List[str] = []
    for name in REQUIRED_RULE_FIELDS:
        if not rule.get(name):
            errors.append(f"{label}: missing required field '{name}'")
    severity = rule.get("severity")
    if severity:
        try:
            Severity.parse(severity)
        except ValueError:
            errors.append(f"{label}: invalid severity '{severity}'")
    raw_flags = rule.get("flags")
    if raw_flags is not None and not isinstance(raw_flags, str):
        errors.append(f"{label}: flags must be a string")
        raw_flags = None
    flags = parse_flags(raw_flags)
    _check_pattern(errors, f"{label}: pattern", rule.get("pattern"), flags)
    _check_pattern(errors, f"{label}: keyPattern", _field(rule, "keyPattern", "key_pattern"), flags)
    _check_pattern(errors, f"{label}: valuePattern", _field(rule, "valuePattern", "value_pattern"), flags)
    return errors


def validate_rule_document(data: Any) -> List[str]:
    """Collect every problem in a ``{name, description, version, rules}`` document."""

    if not isinstance(data, Mapping) or not isinstance(data.get("rules"), list):
        return ["Invalid custom rules format: rules must be an array"]
    errors: List[str] = []
    for index, rule in enumerate(data["rules"]):
        errors.extend(validate_rule(rule, index))
    return errors


def rule_from_dict(data: Mapping[str, Any]) -> Rule:
    flags = parse_flags(data.get("flags"))
    return Rule(
        id=str(data["id"]),
        name=str(data["name"]),
        description=str(data["description"]),
        severity=Severity.parse(data["severity"]),
        pattern=compile_pattern(data["pattern"], flags),
        key_pattern=compile_pattern(_field(data, "keyPattern", "key_pattern"), flags),
        value_pattern=compile_pattern(_field(data, "valuePattern", "value_pattern"), flags),
        suggestion=str(data["suggestion"]),
        enabled=bool(data.get("enabled", True)),
    )


def rules_from_document(data: Any, source: Optional[str] = None) -> List[Rule]:
    errors = validate_rule_document(data)
    if errors:
        raise RuleDefinitionError(errors, source=source)
    return [rule_from_dict(rule) for rule in data["rules"]]


def load_rule_file(path: Path) -> List[Rule]:
    """Load rules from a JSON or YAML document; a missing file yields no rules."""

    data = read_structured_file(path)
    if data is None:
        return []
    rules = rules_from_document(data, source=str(path))
    logger.info("Loaded %d custom rules from %s", len(rules), path)
    return rules


def profile_path(name: str, directory: Path) -> Path:
    return directory / f"{name}.json"


def load_rule_profile(name: str, directory: Path) -> List[Rule]:
    """Load a named profile, falling back to the built-in rules when absent."""

    path = profile_path(name, directory)
    if not path.exists():
        logger.debug("Rule profile %s not found at %s; using built-in rules", name, path)
        return default_rules()
    return load_rule_file(path)


def save_rule_profile(name: str, rules: Iterable[Rule], directory: Path) -> Path:
    path = profile_path(name, directory)
    document = {
        "name": name,
        "description": f"Custom rule profile: {name}",
        "version": "1.0.0",
        "rules": [rule.to_dict() for rule in rules],
    }
    write_text_file(path, json.dumps(document, indent=2))
    return path


def load_workspace_rules(roots: Sequence[str]) -> List[Rule]:
    """Collect rules from ``.env-checker.*`` files at each scan root.

    Invalid workspace files are skipped with a warning rather than aborting the scan.
    """

    rules: List[Rule] = []
    for root in roots:
        root_path = Path(root)
        if not root_path.is_dir():
            continue
        for name in WORKSPACE_RULE_FILES:
            path = root_path / name
            if not path.exists():
                continue
            try:
                rules.extend(load_rule_file(path))
            except (RuleDefinitionError, ValueError, yaml.YAMLError) as exc:
                logger.warning("Skipping workspace rules %s: %s", path, exc)
    return rules


def build_rules(config: ScannerConfig, roots: Sequence[str] = (), profile_dir: Optional[Path] = None) -> List[Rule]:
    """Assemble the catalog: profile (or built-ins), custom rules, workspace rules."""

    if config.rule_profile and config.rule_profile != "default" and profile_dir is not None:
        rules = load_rule_profile(config.rule_profile, profile_dir)
    else:
        rules = default_rules()
    if config.custom_rules_path:
        rules.extend(load_rule_file(Path(config.custom_rules_path)))
    if config.workspace_specific_rules:
        rules.extend(load_workspace_rules(roots))
    return rules
