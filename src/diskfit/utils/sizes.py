# src/diskfit/utils/sizes.py
import re
from decimal import Decimal
from typing import Tuple

from diskfit.config import DISPLAY_UNITS, UNIT_FACTORS
from diskfit.errors import ConfigurationError, SizeFormatError

# A number, optionally signed or fractional, then whatever follows it
_SIZE_RE = re.compile(r"\s*([+-]?\d+(?:\.\d+)?)(.*)\Z", re.DOTALL | re.ASCII)


def _split_size(text: str) -> Tuple[str, int]:
    match = _SIZE_RE.match(text)
    if match is None:
        raise SizeFormatError(f"invalid input: '{text}'")

    number, unit = match.groups()
    if not unit:
        return number, 1

    # The unit is a single letter, nothing more
    if len(unit) == 1 and unit.lower() in UNIT_FACTORS:
        return number, UNIT_FACTORS[unit.lower()]

    raise SizeFormatError(f"unknown unit: '{unit}'")


def parse_size(text: str) -> int:
    """
    Converts a size string like '700m' or '4G' to a number of bytes.
    Units are k, m, g and t (powers of 1000) or b for plain bytes.
    Fractional magnitudes such as '1.50K' are truncated to whole bytes.
    """
    number, factor = _split_size(text)
    return int(Decimal(number) * factor)


def parse_capacity(text: str) -> int:
    """Parses a disk size, which must be a whole, positive number of units."""
    number, factor = _split_size(text)
    size = int(Decimal(number) * factor)
    if "." in number or size <= 0:
        raise ConfigurationError(f"disk size is too small: '{text}'")
    return size


def format_size(num: int) -> str:
    """Renders a byte count with the largest fitting unit, e.g. '1.50K'."""
    for suffix, factor in DISPLAY_UNITS:
        if num >= factor:
            return f"{num / factor:.2f}{suffix}"
    return f"{num}B"
