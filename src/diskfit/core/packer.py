# src/diskfit/core/packer.py
"""
Fits files onto disks using first-fit decreasing: sort the files by size,
largest first, then put each file on the first disk that still has room for
it, opening a new disk only when none has. The big files fill disks quickly
and the small ones left over usually make a good final fit.

This is a heuristic, not an optimal bin packing.
"""
import logging
from typing import Iterable, List

from diskfit.config import DISK_ID_LIMIT
from diskfit.errors import ConfigurationError, TooManyDisksError
from diskfit.models import Disk, FileEntry

logger = logging.getLogger(__name__)


class DiskPacker:
    """One packing run. Owns the disks it creates and their id counter."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ConfigurationError(f"disk size is too small: {capacity}")
        self.capacity = capacity
        self.disks: List[Disk] = []
        self._last_id = 0

    def _new_disk(self) -> Disk:
        self._last_id += 1
        disk = Disk(id=self._last_id, capacity=self.capacity)
        self.disks.append(disk)
        logger.debug(f"Opened disk #{disk.id}")
        return disk

    def place(self, entry: FileEntry) -> Disk:
        """Puts a single file on the first disk with room, or on a new one."""
        for disk in self.disks:
            if disk.fits(entry):
                disk.add(entry)
                return disk

        disk = self._new_disk()
        disk.add(entry)
        return disk

    def pack(self, files: Iterable[FileEntry]) -> List[Disk]:
        # sorted() is stable, so equal sizes keep their input order
        for entry in sorted(files, key=lambda f: f.size, reverse=True):
            self.place(entry)
        logger.info(f"Packed files onto {len(self.disks)} disks of {self.capacity} bytes")
        return self.disks


def pack(files: Iterable[FileEntry], capacity: int) -> List[Disk]:
    """Packs files onto as few disks of the given capacity as the heuristic finds."""
    return DiskPacker(capacity).pack(files)


def ensure_addressable(disks: List[Disk], limit: int = DISK_ID_LIMIT) -> None:
    """Disk directories have 4 digit names, so more disks than that is fatal."""
    if len(disks) > limit:
        raise TooManyDisksError(len(disks), limit)
