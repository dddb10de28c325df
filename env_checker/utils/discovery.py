"""Locate environment files beneath scan roots."""

from __future__ import annotations

import fnmatch
import logging
import re
from pathlib import Path
from typing import Generator, Iterable, Sequence

logger = logging.getLogger(__name__)

ENV_FILE_PATTERN = re.compile(r"\.env(\.|$)")
DEFAULT_EXCLUDE_PATTERNS = ("node_modules/**", "dist/**", "build/**")


def is_environment_file(file_name: str) -> bool:
    """Match ``.env``, ``.env.local``, ``config.env.production`` and ``*.env``."""

    name = Path(file_name).name
    return bool(ENV_FILE_PATTERN.search(name)) or name.endswith(".env")


def is_excluded(relative_path: str, exclude_patterns: Sequence[str]) -> bool:
    posix = relative_path.replace("\\", "/")
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(posix, pattern):
            return True
        # "dir/**" also excludes the directory at any depth.
        if pattern.endswith("/**"):
            prefix = pattern[:-3]
            if posix == prefix or posix.startswith(prefix + "/") or f"/{prefix}/" in f"/{posix}":
                return True
    return False


def iter_env_files(
    root_paths: Iterable[str],
    exclude_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
    max_file_size_kb: int | None = None,
) -> Generator[Path, None, None]:
    """Yield environment files beneath the provided paths.

    A path naming a file is yielded as-is, whatever its name. A missing path
    raises ``FileNotFoundError``. Directories are
    searched recursively for environment files, honouring ``exclude_patterns``.
    """

    for root in root_paths:
        root_path = Path(root)
        if not root_path.exists():
            raise FileNotFoundError(f"Path not found: {root}")
        if root_path.is_file():
            yield root_path
            continue
        for path in sorted(root_path.rglob("*")):
            if not path.is_file() or not is_environment_file(path.name):
                continue
            relative = path.relative_to(root_path).as_posix()
            if is_excluded(relative, exclude_patterns):
                continue
            if max_file_size_kb is not None and path.stat().st_size > max_file_size_kb * 1024:
                logger.warning("Skipping %s: larger than %d KB", path, max_file_size_kb)
                continue
            yield path
