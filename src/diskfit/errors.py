# src/diskfit/errors.py
"""
Error taxonomy for diskfit.

Every error is fatal for the run. Library code raises these; only the CLI
turns them into a message on stderr and a non-zero exit status.
"""
from typing import Optional


class FitError(Exception):
    """Base class for all diskfit errors."""


# --- Configuration ---

class ConfigurationError(FitError):
    """Bad option value, e.g. a non-positive disk size."""


class SizeFormatError(ConfigurationError):
    """A size string could not be parsed."""


class NoFilesError(ConfigurationError):
    """The given paths contain no files to fit."""


# --- Traversal ---

class TraversalError(FitError):
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class UnsupportedEntryError(TraversalError):
    """Entry is neither a regular file nor a directory."""


# --- Capacity ---

class FileTooLargeError(FitError):
    def __init__(self, path: str, size: int, human_size: Optional[str] = None):
        self.path = path
        self.size = size
        shown = human_size if human_size is not None else f"{size}B"
        super().__init__(f"can never fit '{path}' ({shown}).")


class TooManyDisksError(FitError):
    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"fitting takes too many disks. ({count} > {limit})")


# --- Materialization ---

class MaterializationError(FitError):
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
