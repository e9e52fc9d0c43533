# src/diskfit/core/collector.py
import logging
import os
import stat
from typing import Iterable, List, Optional, Tuple

import pathspec

from diskfit.core.ignore import is_excluded
from diskfit.core.paths import normalize
from diskfit.errors import FileTooLargeError, TraversalError, UnsupportedEntryError
from diskfit.models import FileEntry
from diskfit.utils.sizes import format_size

logger = logging.getLogger(__name__)


class FileCollector:
    def __init__(self, capacity: int, recursive: bool = False, exclude: Optional[pathspec.PathSpec] = None):
        self.capacity = capacity
        self.recursive = recursive
        self.exclude = exclude

    def _list_dir(self, path: str) -> List[os.DirEntry]:
        """
        Reads all entries of a directory and closes it again before the
        caller descends, so deep trees don't pile up open handles.
        """
        try:
            with os.scandir(path) as it:
                return list(it)
        except OSError as e:
            raise TraversalError(f"can't open directory '{path}': {e.strerror}", path) from e

    def collect(self, root: str, files: List[FileEntry]) -> List[FileEntry]:
        """
        Searches root for files and appends them to files. Directories are
        only descended into when the collector is recursive.
        Regular files are stat'ed through symlinks; anything that turns out
        to be neither a file nor a directory stops the run.
        """
        # (directory, path relative to root) pairs still to walk
        pending = [(root, "")]
        while pending:
            path, rel_dir = pending.pop()
            self._collect_dir(path, rel_dir, files, pending)
        return files

    def _collect_dir(
        self,
        path: str,
        rel_dir: str,
        files: List[FileEntry],
        pending: List[Tuple[str, str]],
    ) -> None:
        for entry in self._list_dir(path):
            full_name = os.path.join(path, entry.name)
            rel_name = f"{rel_dir}{entry.name}"

            # Cheap check first so excluded sockets or broken links never get stat'ed
            if self.exclude is not None and is_excluded(
                self.exclude, rel_name, is_directory=entry.is_dir()
            ):
                logger.debug(f"Excluding {full_name}")
                continue

            try:
                st = os.stat(full_name)
            except OSError as e:
                raise TraversalError(f"can't access '{full_name}': {e.strerror}", full_name) from e

            if stat.S_ISREG(st.st_mode):
                if st.st_size > self.capacity:
                    raise FileTooLargeError(full_name, st.st_size, format_size(st.st_size))
                files.append(FileEntry(path=full_name, size=st.st_size))
                logger.debug(f"Collected {full_name} ({st.st_size} bytes)")

            elif stat.S_ISDIR(st.st_mode):
                if self.recursive:
                    pending.append((full_name, f"{rel_name}/"))

            else:
                raise UnsupportedEntryError(f"'{full_name}': not a regular file.", full_name)


def collect_files(
    roots: Iterable[str],
    capacity: int,
    recursive: bool = False,
    exclude: Optional[pathspec.PathSpec] = None,
) -> List[FileEntry]:
    """Collects the files of every root into one list."""
    collector = FileCollector(capacity, recursive=recursive, exclude=exclude)
    files: List[FileEntry] = []
    for root in roots:
        path = normalize(root)
        before = len(files)
        collector.collect(path, files)
        logger.info(f"Found {len(files) - before} files in {path}")
    return files
