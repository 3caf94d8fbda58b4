"""Test fixtures for FastFind consumers.

InMemoryDirectoryReader serves directory listings from memory, so the
traversal engine can be exercised deterministically: any attribute bits,
any sizes, injected failures, and full accounting of the sessions the
engine opened and closed.
"""

import threading
import time
from typing import Any, Dict, List, Optional, Tuple

from .._common.config import FileAttributes
from ..core.node import split_size, unix_ns_to_filetime
from ..core.reader import (
    DirectoryListingError,
    DirectoryReader,
    ListingErrorKind,
    RawEntry,
)


# 2020-01-01T00:00:00Z
DEFAULT_FILETIME = unix_ns_to_filetime(1_577_836_800 * 1_000_000_000)


def _key(path: str) -> str:
    """Normalize a path for use as a lookup key."""
    key = path.replace('\\', '/').rstrip('/')
    return key or '/'


def _split(path: str) -> Tuple[str, str]:
    key = _key(path)
    parent, _, name = key.rpartition('/')
    return parent, name


class _MemorySession:
    __slots__ = ('path', 'entries', 'position', 'fail_after')

    def __init__(self, path: str, entries: List[RawEntry], fail_after: Optional[int]):
        self.path = path
        self.entries = entries
        self.position = 0
        self.fail_after = fail_after


class InMemoryDirectoryReader(DirectoryReader):
    """DirectoryReader over an in-memory tree.

    Example:
        reader = InMemoryDirectoryReader.from_tree("root", {
            "a.txt": 10,
            "sub": {"b.txt": 20},
        })
        results = fast_find("root", reader=reader, recurse=True)
    """

    def __init__(self, navigation_entries: bool = True, open_delay: float = 0.0):
        """Initialize an empty reader.

        Args:
            navigation_entries: List "." and ".." first in every directory
            open_delay: Seconds to sleep in open(), to widen race windows
        """
        self.navigation_entries = navigation_entries
        self.open_delay = open_delay

        self._listings: Dict[str, List[RawEntry]] = {}
        self._failures: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

        self.opened_paths: List[str] = []
        self.open_sessions = 0
        self.peak_open_sessions = 0
        self.closed_sessions = 0
        self.thread_names = set()

    @classmethod
    def from_tree(cls, root: str, tree: Dict[str, Any], **kwargs) -> 'InMemoryDirectoryReader':
        """Build a reader from a nested dict.

        Dict values are directories, int values are file sizes.
        """
        reader = cls(**kwargs)
        reader.add_directory(root)
        reader._add_tree(root, tree)
        return reader

    def _add_tree(self, parent: str, tree: Dict[str, Any]) -> None:
        for name, value in tree.items():
            path = f"{_key(parent)}/{name}"
            if isinstance(value, dict):
                self.add_directory(path)
                self._add_tree(path, value)
            else:
                self.add_file(path, size=value)

    # Building the tree

    def add_directory(self, path: str, attributes: int = 0,
                      times: Optional[Tuple[int, int, int]] = None) -> None:
        """Register a directory (and list it in its parent, if known).

        Args:
            path: Directory path
            attributes: Extra attribute bits; DIRECTORY is always added
            times: (creation, last access, last write) FILETIME ticks
        """
        key = _key(path)
        self._listings.setdefault(key, [])
        self._add_entry(path, int(attributes) | FileAttributes.DIRECTORY, 0, times)

    def add_file(self, path: str, size: int = 0, attributes: int = 0,
                 times: Optional[Tuple[int, int, int]] = None) -> None:
        """Register a file in its (already registered) parent directory."""
        self._add_entry(path, int(attributes), size, times)

    def add_raw_entry(self, directory: str, raw: RawEntry) -> None:
        """List an arbitrary raw entry in a directory."""
        self._listings.setdefault(_key(directory), []).append(raw)

    def _add_entry(self, path: str, attributes: int, size: int,
                   times: Optional[Tuple[int, int, int]]) -> None:
        parent, name = _split(path)
        if parent not in self._listings:
            return
        creation, access, write = times or (DEFAULT_FILETIME,) * 3
        high, low = split_size(size)
        self._listings[parent].append(RawEntry(
            name=name,
            attributes=int(attributes),
            size_high=high,
            size_low=low,
            creation_time=creation,
            last_access_time=access,
            last_write_time=write,
        ))

    def fail(self, path: str, code: int = 5, message: str = "Access is denied.",
             kind: ListingErrorKind = ListingErrorKind.OTHER,
             after_entries: Optional[int] = None) -> None:
        """Make listing ``path`` fail.

        Args:
            path: Directory whose listing fails
            code: Native error code to report
            message: Error message to report
            kind: Failure classification
            after_entries: Fail in next() after this many entries instead of in open()
        """
        self._failures[_key(path)] = {
            'code': code,
            'message': message,
            'kind': kind,
            'after_entries': after_entries,
        }

    # DirectoryReader interface

    def open(self, path: str, pattern: str, large_fetch: bool = False) -> _MemorySession:
        if self.open_delay:
            time.sleep(self.open_delay)

        key = _key(path)
        failure = self._failures.get(key)
        if failure is not None and failure['after_entries'] is None:
            raise DirectoryListingError(path, failure['message'], failure['code'], failure['kind'])

        if key not in self._listings:
            raise DirectoryListingError(path, "The system cannot find the path specified.",
                                        3, ListingErrorKind.NOT_FOUND)

        entries = list(self._listings[key])
        if self.navigation_entries:
            entries = [self._navigation('.'), self._navigation('..')] + entries

        fail_after = None
        if failure is not None:
            fail_after = failure['after_entries'] + (2 if self.navigation_entries else 0)

        with self._lock:
            self.opened_paths.append(path)
            self.open_sessions += 1
            self.peak_open_sessions = max(self.peak_open_sessions, self.open_sessions)
            self.thread_names.add(threading.current_thread().name)
        return _MemorySession(path, entries, fail_after)

    def next(self, session: _MemorySession) -> Optional[RawEntry]:
        if session.fail_after is not None and session.position >= session.fail_after:
            failure = self._failures[_key(session.path)]
            raise DirectoryListingError(session.path, failure['message'],
                                        failure['code'], failure['kind'])
        if session.position >= len(session.entries):
            return None
        raw = session.entries[session.position]
        session.position += 1
        return raw

    def close(self, session: _MemorySession) -> None:
        with self._lock:
            self.open_sessions -= 1
            self.closed_sessions += 1

    @staticmethod
    def _navigation(name: str) -> RawEntry:
        return RawEntry(name, int(FileAttributes.DIRECTORY), 0, 0,
                        DEFAULT_FILETIME, DEFAULT_FILETIME, DEFAULT_FILETIME)
