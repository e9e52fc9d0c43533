# src/diskfit/core/ignore.py
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pathspec

from diskfit.errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_exclude_spec(
    patterns: Iterable[str] = (),
    exclude_file: Optional[str] = None,
) -> Optional[pathspec.PathSpec]:
    """
    Builds a PathSpec from command line patterns plus the lines of an
    optional exclude file (gitignore syntax, '#' comments, '!' negation).
    Returns None when there is nothing to exclude.
    """
    lines: List[str] = []

    if exclude_file is not None:
        exclude_path = Path(exclude_file)
        try:
            with open(exclude_path, "r", encoding="utf-8") as f:
                lines.extend(f.read().splitlines())
        except OSError as e:
            raise ConfigurationError(
                f"can't read exclude file '{exclude_file}': {e.strerror}"
            ) from e
        logger.debug(f"Loaded {len(lines)} exclude lines from {exclude_path}")

    lines.extend(patterns)

    if not any(line.strip() and not line.lstrip().startswith("#") for line in lines):
        return None

    try:
        return pathspec.GitIgnoreSpec.from_lines(lines)
    except Exception as e:
        raise ConfigurationError(f"invalid exclude pattern: {e}") from e


def is_excluded(spec: Optional[pathspec.PathSpec], rel_path: str, is_directory: bool = False) -> bool:
    """
    Matches a path relative to the collection root. Directories are also
    tried with a trailing slash so that 'build/' style patterns apply.
    """
    if spec is None:
        return False
    if is_directory and spec.match_file(rel_path + "/"):
        return True
    return spec.match_file(rel_path)
