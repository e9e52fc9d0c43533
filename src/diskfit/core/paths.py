# src/diskfit/core/paths.py
import re

SEP = "/"

_SEP_RUN_RE = re.compile(r"/{2,}")


def normalize(path: str) -> str:
    """
    Strips consecutive and trailing slashes from a path.
    Purely textual: the path does not have to exist, so realpath/resolve
    can't be used here.
    """
    cleaned = _SEP_RUN_RE.sub(SEP, path)
    if len(cleaned) > 1 and cleaned.endswith(SEP):
        cleaned = cleaned[:-1]
    return cleaned
