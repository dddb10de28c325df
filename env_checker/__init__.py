"""Env-checker: rule-driven security scanner for ``KEY=VALUE`` environment files."""

from importlib.metadata import version, PackageNotFoundError

from .engine import EnvScanner
from .result import Finding, ScanResult
from .rules import Rule, RuleCatalog
from .severity import Severity

try:
    __version__ = version("env-checker")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "EnvScanner",
    "Finding",
    "Rule",
    "RuleCatalog",
    "ScanResult",
    "Severity",
]
