"""Severity definitions for scanner findings."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the supported severity levels, ordered by decreasing urgency."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Return an integer ranking; higher means more urgent."""

        ordering = {
            Severity.CRITICAL: 2,
            Severity.WARNING: 1,
            Severity.INFO: 0,
        }
        return ordering[self]

    @property
    def icon(self) -> str:
        icons = {
            Severity.CRITICAL: "\U0001f6a8",
            Severity.WARNING: "\u26a0\ufe0f",
            Severity.INFO: "\u2139\ufe0f",
        }
        return icons[self]

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Resolve a severity from its value or name, case-insensitively."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r}") from None


SEVERITY_ORDER = (Severity.CRITICAL, Severity.WARNING, Severity.INFO)
