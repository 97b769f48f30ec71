"""Sibling image collection and cyclic navigation (Qt-independent).

This module handles the list of images living next to the displayed one:
- Scanning a directory (non-recursive) for supported image files
- Sorting by name, extension, modification time or size (stable)
- Locating a path in the list via canonical (symlink-resolved) paths
- Cyclic next/previous navigation

None of the operations raise for filesystem problems: an unreadable
directory yields an empty collection and a path that cannot be resolved
is simply "not found".
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from .constants import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class SortKey(str, Enum):
    """Ordering of the collection."""

    NAME = "name"
    EXTENSION = "ext"
    DATE = "date"
    SIZE = "size"


@dataclass(frozen=True)
class ImageEntry:
    """A supported image file found in the scanned directory.

    Attributes:
        path: Path as listed from the directory
        modified: Modification time (POSIX timestamp), None if unavailable
        size: File size in bytes, None if unavailable
    """

    path: Path
    modified: Optional[float] = None
    size: Optional[int] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix[1:]

    @classmethod
    def from_path(cls, path: PathLike) -> "ImageEntry":
        p = Path(path)
        try:
            st = p.stat()
        except OSError as e:
            logger.debug("Cannot stat %s: %s", p, e)
            return cls(p)
        return cls(p, st.st_mtime, st.st_size)


@dataclass
class Collection:
    """Ordered image entries of one directory plus the current index."""

    directory: Optional[Path] = None
    entries: List[ImageEntry] = field(default_factory=list)
    index: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    @property
    def current(self) -> Optional[ImageEntry]:
        if not self.entries:
            return None
        return self.entries[self.index]

    def paths(self) -> List[Path]:
        return [e.path for e in self.entries]


def is_supported(path: PathLike) -> bool:
    """Return True if ``path`` has a supported extension (case-insensitive)."""
    return Path(path).suffix[1:].lower() in SUPPORTED_EXTENSIONS


def canonical_path(path: PathLike) -> Optional[Path]:
    """Return the absolute, symlink-resolved form of ``path`` or None."""
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        logger.debug("Cannot canonicalize %s: %s", path, e)
        return None


def scan(directory: Optional[PathLike]) -> Collection:
    """List supported image files directly inside ``directory``.

    Args:
        directory: Directory to scan. None yields an empty collection.

    Returns:
        Collection in directory listing order with index 0.
    """
    if directory is None:
        return Collection()
    folder = Path(directory)
    entries = []
    try:
        with os.scandir(folder) as it:
            for dir_entry in it:
                try:
                    if not dir_entry.is_file():
                        continue
                except OSError:
                    continue
                if is_supported(dir_entry.name):
                    entries.append(ImageEntry.from_path(dir_entry.path))
    except OSError as e:
        logger.warning("Cannot read directory %s: %s", folder, e)
        return Collection(directory=folder)
    logger.debug("Scanned %s: %d images", folder, len(entries))
    return Collection(directory=folder, entries=entries)


def _sort_value(entry: ImageEntry, key: SortKey):
    if key == SortKey.NAME:
        return entry.name
    if key == SortKey.EXTENSION:
        return entry.extension
    if key == SortKey.DATE:
        return entry.modified if entry.modified is not None else float("-inf")
    if key == SortKey.SIZE:
        return entry.size if entry.size is not None else 0
    raise ValueError(f"Unknown sort key: {key!r}")


def sort_collection(collection: Collection, key: SortKey) -> None:
    """Reorder ``collection`` in place by ``key``.

    Uses Python's stable sort, so ties keep their previous relative order.
    The index is not adjusted; callers re-``locate`` the current path.
    """
    key = SortKey(key)
    collection.entries.sort(key=lambda e: _sort_value(e, key))


def locate(collection: Collection, path: PathLike) -> Optional[int]:
    """Return the index of ``path`` in ``collection`` or None.

    Both the target and every candidate are canonicalized, so a path reached
    through another relative route or a symlink still matches.
    """
    target = canonical_path(path)
    if target is None:
        return None
    for i, entry in enumerate(collection.entries):
        if canonical_path(entry.path) == target:
            return i
    return None


def advance(collection: Collection, index: int, direction: int) -> int:
    """Return the cyclic neighbour of ``index``.

    ``direction > 0`` moves forward, otherwise backward. An empty collection
    returns ``index`` unchanged.
    """
    n = len(collection)
    if n == 0:
        return index
    if direction > 0:
        return (index + 1) % n
    return (index + n - 1) % n


class ImageCollectionNavigator:
    """Owns the collection of the active directory.

    The directory is rescanned only when the canonical parent of the opened
    image differs from the recorded one; switching images inside the same
    directory only locates the new path.
    """

    def __init__(self, sort_key: SortKey = SortKey.NAME):
        self.sort_key = SortKey(sort_key)
        self.collection = Collection()
        self.scan_count = 0

    @property
    def index(self) -> int:
        return self.collection.index

    @property
    def current_path(self) -> Optional[Path]:
        entry = self.collection.current
        return entry.path if entry is not None else None

    def __len__(self) -> int:
        return len(self.collection)

    def open(self, path: PathLike) -> Optional[int]:
        """Make ``path`` the active image, rescanning its directory if needed.

        Returns:
            Index of ``path`` in the collection, or None if not listed.
        """
        folder_canonical = canonical_path(Path(path).parent)
        if folder_canonical is None or folder_canonical != self.collection.directory:
            self.collection = scan(folder_canonical)
            self.scan_count += 1
            sort_collection(self.collection, self.sort_key)
        return self._relocate(path)

    def set_sort_key(self, key: SortKey) -> None:
        """Change ordering without rescanning; the current image stays current."""
        current = self.current_path
        self.sort_key = SortKey(key)
        sort_collection(self.collection, self.sort_key)
        if current is not None:
            self._relocate(current)

    def step(self, direction: int) -> Optional[Path]:
        """Move to the next (``direction > 0``) or previous image.

        Returns:
            The new current path, or None if the collection is empty.
        """
        if self.collection.is_empty():
            return None
        self.collection.index = advance(self.collection, self.collection.index, direction)
        return self.current_path

    def _relocate(self, path: PathLike) -> Optional[int]:
        idx = locate(self.collection, path)
        if idx is not None:
            self.collection.index = idx
        elif self.collection.entries:
            self.collection.index = min(self.collection.index, len(self.collection) - 1)
        else:
            self.collection.index = 0
        return idx
