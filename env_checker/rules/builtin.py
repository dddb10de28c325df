"""Built-in detection rules for environment files."""

from __future__ import annotations

import re
from typing import List

from env_checker.severity import Severity

from . import Rule


def default_rules() -> List[Rule]:
    """Return a fresh copy of the built-in rules, in evaluation order."""

    return [
        Rule(
            id="password-hardcoded",
            name="Hardcoded Password",
            description="Detects hardcoded passwords in environment variables",
            severity=Severity.CRITICAL,
            pattern=re.compile(r"^(.*password.*|.*pwd.*|.*pass.*)=.+$", re.I),
            key_pattern=re.compile(r"(password|pwd|pass)", re.I),
            # Values that look like ${VAR}, %{VAR} or <placeholder> are references, not secrets.
            value_pattern=re.compile(r"^(?!.*(\$\{|%\{|<|>)).{1,}$"),
            suggestion="Remove hardcoded password and use secure environment variable injection",
        ),
        Rule(
            id="api-key-exposed",
            name="Exposed API Key",
            description="Detects potentially exposed API keys",
            severity=Severity.CRITICAL,
            pattern=re.compile(r"^(.*api.*key.*|.*secret.*|.*token.*)=.+$", re.I),
            key_pattern=re.compile(r"(api.*key|secret|token)", re.I),
            value_pattern=re.compile(r"^[a-zA-Z0-9_-]{20,}$"),
            suggestion="Use environment variable injection or secure key management",
        ),
        Rule(
            id="database-url-exposed",
            name="Database URL with Credentials",
            description="Detects database URLs containing credentials",
            severity=Severity.CRITICAL,
            pattern=re.compile(r"^.*_url.*=.*://.*:.*@.*$", re.I),
            key_pattern=re.compile(r".*url.*", re.I),
            value_pattern=re.compile(r"://[^:]+:[^@]+@"),
            suggestion="Remove credentials from URL and use separate environment variables",
        ),
        Rule(
            id="debug-enabled",
            name="Debug Mode Enabled",
            description="Debug mode should not be enabled in production",
            severity=Severity.WARNING,
            pattern=re.compile(r"^debug\s*=\s*(true|1|on|yes)$", re.I),
            key_pattern=re.compile(r"^debug$", re.I),
            value_pattern=re.compile(r"^(true|1|on|yes)$", re.I),
            suggestion="Set DEBUG=false or remove for production environments",
        ),
        Rule(
            id="private-key-exposed",
            name="Private Key Exposed",
            description="Detects private keys or certificates in plain text",
            severity=Severity.CRITICAL,
            pattern=re.compile(r"^.*private.*key.*=.*BEGIN.*PRIVATE.*KEY.*$", re.I),
            key_pattern=re.compile(r"private.*key", re.I),
            value_pattern=re.compile(r"BEGIN.*PRIVATE.*KEY"),
            suggestion="Store private keys in secure key management system",
        ),
        Rule(
            id="weak-password",
            name="Weak Password",
            description="Detects commonly used weak passwords",
            severity=Severity.WARNING,
            pattern=re.compile(r"^.*password.*=\s*(123456|password|admin|root|test|demo)$", re.I),
            key_pattern=re.compile(r"password", re.I),
            value_pattern=re.compile(r"^(123456|password|admin|root|test|demo)$", re.I),
            suggestion="Use a strong, unique password",
        ),
        Rule(
            id="localhost-url",
            name="Localhost URL",
            description="Localhost URLs should not be used in production",
            severity=Severity.INFO,
            pattern=re.compile(r"^.*url.*=.*localhost.*$", re.I),
            key_pattern=re.compile(r"url", re.I),
            value_pattern=re.compile(r"localhost", re.I),
            suggestion="Replace with production URL or use environment-specific configuration",
        ),
    ]


BUILTIN_RULE_IDS = tuple(rule.id for rule in default_rules())
