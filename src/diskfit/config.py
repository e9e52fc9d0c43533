# src/diskfit/config.py
from dataclasses import dataclass
from typing import Optional, Tuple

KB = 1000
MB = KB * KB
GB = MB * KB
TB = GB * KB

# Unit letter -> multiplier, accepted case-insensitively in size strings
UNIT_FACTORS = {
    "b": 1,
    "k": KB,
    "m": MB,
    "g": GB,
    "t": TB,
}

# Largest first, used when rendering sizes
DISPLAY_UNITS = [
    ("T", TB),
    ("G", GB),
    ("M", MB),
    ("K", KB),
]

# Disk directories are named %04d, so ids above this can't be materialized
DISK_ID_WIDTH = 4
DISK_ID_LIMIT = 10 ** DISK_ID_WIDTH - 1

# Owner-only rwx for directories created in link mode
DIR_MODE = 0o700


@dataclass(frozen=True)
class FitOptions:
    """Parsed command line options handed to the core."""
    capacity: int
    paths: Tuple[str, ...]
    destdir: Optional[str] = None
    recursive: bool = False
    count_only: bool = False
    exclude: Tuple[str, ...] = ()
    exclude_file: Optional[str] = None

    @property
    def link_mode(self) -> bool:
        return self.destdir is not None
