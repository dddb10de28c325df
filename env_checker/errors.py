"""Exception types raised outside of the scanning hot path."""

from __future__ import annotations

from typing import Iterable, List


class EnvCheckerError(Exception):
    """Base class for env-checker errors."""


class RuleDefinitionError(EnvCheckerError):
    """Raised when a rule document fails validation."""

    def __init__(self, errors: Iterable[str], source: str | None = None) -> None:
        self.errors: List[str] = list(errors)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid rule definitions{where}: " + "; ".join(self.errors))
