"""
Filesystem probe used by the resolver and the enumerator.

Every function here is total over missing paths: absence is reported as a
value (Kind.ABSENT, an empty listing), never raised.
"""
import os
from enum import Enum
from pathlib import Path
from typing import NamedTuple


class Kind(Enum):
    ABSENT = "absent"
    FILE = "file"
    DIRECTORY = "directory"


class Entry(NamedTuple):
    """
    point-in-time snapshot of one directory child.

    entries are recomputed on every query; nothing caches them.
    """
    name: str
    path: Path
    is_directory: bool


def probe(path, /):
    """
    classify a path as absent, a file, or a directory (symlinks are followed).

    a broken symlink or an unreadable parent reports as absent.
    """
    try:
        if not os.path.exists(path):
            return Kind.ABSENT
        return Kind.DIRECTORY if os.path.isdir(path) else Kind.FILE
    except (OSError, ValueError):  # ValueError: embedded NUL in the path
        return Kind.ABSENT


def children(path, /):
    """
    list the entries of a directory in the order the OS yields them.

    a missing path, a non-directory, an unreadable directory or a symlink
    loop lists as no entries.
    """
    entries = []
    try:
        with os.scandir(path) as iterator:
            for item in iterator:
                try:
                    is_directory = item.is_dir()
                except OSError:
                    is_directory = False
                entries.append(Entry(item.name, Path(item.path).absolute(), is_directory))
    except OSError:
        return []
    return entries


def segment(name, /):
    """
    whether `name` can be one path component directly under a directory.

    empty names, '.', '..' and anything holding a separator would walk
    somewhere other than a child of the current position.
    """
    if not name or name in (os.curdir, os.pardir) or "\0" in name:
        return False
    return not any(separator and separator in name for separator in (os.sep, os.altsep))


def ensure(path, /):
    """create a directory and its parents; an existing directory is fine."""
    Path(path).mkdir(parents=True, exist_ok=True)


__all__ = (
    "Kind",
    "Entry",
    "probe",
    "children",
    "segment",
    "ensure",
)
