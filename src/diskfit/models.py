# src/diskfit/models.py
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class FileEntry:
    """Immutable data class holding a discovered file and its size in bytes."""
    path: str
    size: int


@dataclass
class Disk:
    """
    A container of fixed capacity holding the files assigned to it, in
    assignment order. Ids count up from 1 in creation order, so the last
    disk's id is also the number of disks made.
    """
    id: int
    capacity: int
    remaining_capacity: int = field(init=False)
    files: List[FileEntry] = field(default_factory=list)

    def __post_init__(self):
        self.remaining_capacity = self.capacity

    def fits(self, entry: FileEntry) -> bool:
        return self.remaining_capacity >= entry.size

    def add(self, entry: FileEntry) -> None:
        if not self.fits(entry):
            raise ValueError(
                f"'{entry.path}' ({entry.size}) does not fit on disk #{self.id} "
                f"({self.remaining_capacity} free)"
            )
        self.files.append(entry)
        self.remaining_capacity -= entry.size

    @property
    def used(self) -> int:
        return self.capacity - self.remaining_capacity

    @property
    def percent_free(self) -> int:
        return self.remaining_capacity * 100 // self.capacity
