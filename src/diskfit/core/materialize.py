# src/diskfit/core/materialize.py
import logging
import os
import stat
import sys
from typing import List, Optional, TextIO, Tuple

from diskfit.config import DIR_MODE, DISK_ID_LIMIT, DISK_ID_WIDTH, FitOptions
from diskfit.core.paths import SEP, normalize
from diskfit.errors import MaterializationError, TooManyDisksError
from diskfit.models import Disk, FileEntry
from diskfit.utils.sizes import format_size

logger = logging.getLogger(__name__)


# --- Report mode ---

def render_disk(disk: Disk) -> str:
    """Renders a disk header and its files, one per line."""
    header = f"Disk #{disk.id}, {disk.percent_free}% ({format_size(disk.remaining_capacity)}) free:"
    rule = "-" * len(header)

    lines = [rule, header, rule]
    for entry in disk.files:
        lines.append(f"{format_size(entry.size):>10} {entry.path}")
    lines.append("")
    return "\n".join(lines) + "\n"


def print_report(disks: List[Disk], stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stdout
    for disk in disks:
        out.write(render_disk(disk))


# --- Count-only mode ---

def count_summary(disks: List[Disk]) -> str:
    count = len(disks)
    return f"{count} disk{'s' if count > 1 else ''}."


# --- Link mode ---

def disk_dir_name(destdir: str, disk: Disk) -> str:
    if disk.id > DISK_ID_LIMIT:
        raise TooManyDisksError(disk.id, DISK_ID_LIMIT)
    return normalize(f"{destdir}{SEP}{disk.id:0{DISK_ID_WIDTH}d}")


def make_dir(path: str) -> None:
    """Creates a directory; an existing path is fine as long as it is one."""
    try:
        st = os.stat(path)
    except OSError:
        pass
    else:
        if not stat.S_ISDIR(st.st_mode):
            raise MaterializationError(f"'{path}' is not a directory.", path)
        return

    try:
        os.mkdir(path, DIR_MODE)
    except OSError as e:
        raise MaterializationError(f"can't make directory '{path}': {e.strerror}", path) from e


def make_dirs(path: str) -> None:
    """Creates every missing directory along path, one component at a time."""
    pos = path.find(SEP, 1)
    while pos != -1:
        make_dir(path[:pos])
        pos = path.find(SEP, pos + 1)
    make_dir(path)


def link_destination(disk_dir: str, source: str) -> str:
    """
    Where a source file goes inside its disk directory. The file keeps its
    path as collected; absolute paths nest under the disk directory.
    """
    rel = normalize(source).lstrip(SEP)
    if ".." in rel.split(SEP):
        raise MaterializationError(f"'{source}' would be linked outside of '{disk_dir}'.", source)
    return f"{disk_dir}{SEP}{rel}"


def plan_disk_links(disk: Disk, destdir: str) -> Tuple[str, List[Tuple[FileEntry, str]]]:
    """Works out the disk directory and every link destination of a disk."""
    disk_dir = disk_dir_name(destdir, disk)
    return disk_dir, [(entry, link_destination(disk_dir, entry.path)) for entry in disk.files]


def _link_planned(disk_dir: str, links: List[Tuple[FileEntry, str]], out: TextIO) -> str:
    for entry, dest_file in links:
        make_dirs(os.path.dirname(dest_file))

        try:
            os.link(entry.path, dest_file)
        except OSError as e:
            raise MaterializationError(
                f"can't link '{entry.path}' to '{dest_file}': {e.strerror}", dest_file
            ) from e

        logger.debug(f"Linked {entry.path} to {dest_file}")
        print(f"{entry.path} -> {disk_dir}", file=out)

    return disk_dir


def link_disk(disk: Disk, destdir: str, stream: Optional[TextIO] = None) -> str:
    """Hardlinks the files of a disk into its numbered directory under destdir."""
    out = stream if stream is not None else sys.stdout
    disk_dir, links = plan_disk_links(disk, destdir)
    return _link_planned(disk_dir, links, out)


def link_disks(disks: List[Disk], destdir: str, stream: Optional[TextIO] = None) -> List[str]:
    """
    Hardlinks every disk. All destinations are worked out before the first
    directory or link is made, so a bad disk id or path leaves nothing behind.
    """
    out = stream if stream is not None else sys.stdout
    plans = [plan_disk_links(disk, destdir) for disk in disks]
    return [_link_planned(disk_dir, links, out) for disk_dir, links in plans]


def materialize(disks: List[Disk], options: FitOptions, stream: Optional[TextIO] = None) -> None:
    """Counts, links or reports the disks depending on the options."""
    out = stream if stream is not None else sys.stdout

    if options.count_only:
        print(count_summary(disks), file=out)
        return

    if options.link_mode:
        link_disks(disks, options.destdir, out)
    else:
        print_report(disks, out)
