# src/diskfit/cli.py
import sys
import argparse
import logging
from typing import List, Optional

from diskfit.config import FitOptions
from diskfit.core.collector import collect_files
from diskfit.core.ignore import load_exclude_spec
from diskfit.core.materialize import materialize
from diskfit.core.packer import ensure_addressable, pack
from diskfit.errors import FitError, NoFilesError
from diskfit.utils.sizes import format_size, parse_capacity

PROG = "diskfit"

logger = logging.getLogger(__name__)


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Fit files onto as few fixed-size disks as possible, then list them or hardlink them into one directory per disk.",
    )
    parser.add_argument("paths", nargs="+", help="Path to the files to fit")
    parser.add_argument("-s", "--size", required=True, help="Disk size in k, m, g or t (powers of 1000), e.g. 4700m")
    parser.add_argument(
        "-l", "--link",
        dest="destdir",
        default=None,
        help="Directory to link files into; if omitted just print the disks",
    )
    parser.add_argument("-n", "--count", action="store_true", help="Only show the number of disks it takes")
    parser.add_argument("-r", "--recursive", action="store_true", help="Recursive search of the paths")
    parser.add_argument(
        "-x", "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip entries matching a gitignore-style pattern (repeatable)",
    )
    parser.add_argument("--exclude-from", default=None, metavar="FILE", help="Read exclude patterns from FILE")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    return parser


def build_options(args: argparse.Namespace) -> FitOptions:
    """Turns parsed arguments into the options the core works with."""
    return FitOptions(
        capacity=parse_capacity(args.size),
        paths=tuple(args.paths),
        destdir=args.destdir,
        recursive=args.recursive,
        count_only=args.count,
        exclude=tuple(args.exclude),
        exclude_file=args.exclude_from,
    )


def run(options: FitOptions) -> None:
    # 1. Exclude rules
    exclude_spec = load_exclude_spec(options.exclude, options.exclude_file)

    # 2. Collecting
    files = collect_files(options.paths, options.capacity, options.recursive, exclude_spec)
    if not files:
        raise NoFilesError("no files found.")

    # 3. Packing
    logger.info(f"Fitting {len(files)} files onto disks of {format_size(options.capacity)}")
    disks = pack(files, options.capacity)
    ensure_addressable(disks)

    # 4. Output
    materialize(disks, options)


def main(argv: Optional[List[str]] = None):
    parser = create_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        options = build_options(args)
        run(options)

    except FitError as e:
        print(f"{PROG}: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
