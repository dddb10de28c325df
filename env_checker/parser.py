"""Split environment file text into candidate ``KEY=VALUE`` lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

ASSIGNMENT_PATTERN = re.compile(r"^([^=]+)=(.*)$")
BYTE_ORDER_MARK = "\ufeff"


@dataclass(frozen=True)
class ParsedLine:
    """A non-comment assignment line with its 1-based line number."""

    line_number: int
    key: str
    value: str
    full_line: str


def split_lines(content: str) -> List[str]:
    """Split on ``\\n`` only; an empty document is a single empty line."""

    return content.split("\n")


def parse_line(line: str, line_number: int) -> Optional[ParsedLine]:
    trimmed = line.strip().lstrip(BYTE_ORDER_MARK).strip()
    if not trimmed or trimmed.startswith("#"):
        return None
    match = ASSIGNMENT_PATTERN.match(trimmed)
    if not match:
        return None
    key, value = match.groups()
    return ParsedLine(
        line_number=line_number,
        key=key.strip(),
        value=value.strip(),
        full_line=trimmed,
    )


def parse_content(content: str) -> Iterator[ParsedLine]:
    """Yield assignment lines; blank, comment and malformed lines are skipped."""

    for index, line in enumerate(split_lines(content), start=1):
        parsed = parse_line(line, index)
        if parsed is not None:
            yield parsed
