"""Basic file IO helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

YAML_SUFFIXES = (".yaml", ".yml")


def read_structured_file(path: Path) -> Any:
    """Return parsed JSON or YAML if the file exists, otherwise ``None``.

    ``.json`` files go through the JSON parser; everything else is read as YAML,
    which also accepts plain JSON documents.
    """

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            return json.load(handle)
        return yaml.safe_load(handle)


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text without a leading BOM; undecodable bytes are replaced."""

    return path.read_text(encoding="utf-8-sig", errors="replace")


def write_text_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
