"""FileInformation records and the entry classifier.

A FileInformation is a plain, immutable data container describing one
matched entry. The classifier turns a RawEntry from a DirectoryReader
into one.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from .._common.config import FileAttributes
from .reader import RawEntry


FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

# Ticks between 1601-01-01 and 1970-01-01
FILETIME_UNIX_OFFSET = 116444736000000000

_NAVIGATION_NAMES = frozenset(('.', '..'))


@dataclass(frozen=True)
class FileInformation:
    """Metadata for one matched filesystem entry."""

    name: str
    path: str
    parent: str
    attributes: FileAttributes
    file_size: Optional[int]
    creation_time: datetime
    last_access_time: datetime
    last_write_time: datetime

    @property
    def is_directory(self) -> bool:
        return bool(self.attributes & FileAttributes.DIRECTORY)

    def identifier(self) -> str:
        """Return the full path as unique identifier."""
        return self.path

    def is_leaf(self) -> bool:
        return not self.is_directory

    def metadata(self) -> Dict[str, Any]:
        """Return a plain dictionary view suitable for serialization."""
        return {
            'name': self.name,
            'path': self.path,
            'parent': self.parent,
            'attributes': int(self.attributes),
            'attribute_names': attribute_names(self.attributes),
            'type': 'directory' if self.is_directory else 'file',
            'size': self.file_size,
            'creation_time': self.creation_time.isoformat(),
            'last_access_time': self.last_access_time.isoformat(),
            'last_write_time': self.last_write_time.isoformat(),
        }

    def __str__(self) -> str:
        return self.path


def attribute_names(attributes: int):
    """List the names of the known attribute bits that are set."""
    return [
        flag.name for flag in FileAttributes
        if flag.value and attributes & flag.value == flag.value
    ]


def is_navigation_entry(name: str) -> bool:
    """Check for the synthetic "." and ".." entries."""
    return name in _NAVIGATION_NAMES


def combine_size(high: int, low: int) -> int:
    """Combine the two 32-bit halves of a file size."""
    return (high << 32) + low


def split_size(size: int):
    """Split a size into (high, low) 32-bit halves."""
    return size >> 32, size & 0xFFFFFFFF


def filetime_to_datetime(ticks: int) -> datetime:
    """Convert FILETIME ticks to a UTC datetime.

    Values outside the datetime range are clamped to datetime.min or
    datetime.max.
    """
    try:
        return FILETIME_EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError:
        if ticks < 0:
            return datetime.min.replace(tzinfo=timezone.utc)
        return datetime.max.replace(tzinfo=timezone.utc)


def unix_ns_to_filetime(nanoseconds: int) -> int:
    """Convert a Unix timestamp in nanoseconds to FILETIME ticks."""
    return nanoseconds // 100 + FILETIME_UNIX_OFFSET


def classify(raw: RawEntry, parent: str) -> Optional[FileInformation]:
    """Build a FileInformation from a raw listing entry.

    Args:
        raw: Entry reported by a DirectoryReader
        parent: Directory the entry was listed from

    Returns:
        FileInformation, or None for "." and ".."
    """
    if is_navigation_entry(raw.name):
        return None

    attributes = FileAttributes(raw.attributes)
    file_size = None
    if not attributes & FileAttributes.DIRECTORY:
        file_size = combine_size(raw.size_high, raw.size_low)

    return FileInformation(
        name=raw.name,
        path=os.path.join(parent, raw.name),
        parent=parent,
        attributes=attributes,
        file_size=file_size,
        creation_time=filetime_to_datetime(raw.creation_time),
        last_access_time=filetime_to_datetime(raw.last_access_time),
        last_write_time=filetime_to_datetime(raw.last_write_time),
    )
