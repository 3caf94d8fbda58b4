"""Portable directory reader built on os.scandir.

os.scandir lists a directory in batches (getdents on Linux, FindFirstFile
on Windows) and caches per-entry type and stat data, so no extra stat call
is needed for most entries. POSIX has no attribute bits, so they are
synthesized from the mode, the name and the BSD file flags.
"""

import errno
import os
import stat
from typing import Optional

from .._common.config import FileAttributes
from ..core.node import split_size, unix_ns_to_filetime
from ..core.reader import (
    DirectoryListingError,
    DirectoryReader,
    ListingErrorKind,
    RawEntry,
)
from ..paths import normalize_path


_NOT_FOUND_ERRNOS = frozenset((errno.ENOENT, errno.ENOTDIR))

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


class _ScandirSession:
    """Open scandir iterator plus the path it was opened on."""

    __slots__ = ('path', 'iterator')

    def __init__(self, path: str, iterator):
        self.path = path
        self.iterator = iterator


def _listing_error(path: str, error: OSError) -> DirectoryListingError:
    code = error.errno
    kind = ListingErrorKind.NOT_FOUND if code in _NOT_FOUND_ERRNOS else ListingErrorKind.OTHER
    message = error.strerror or str(error)
    return DirectoryListingError(path, message, code, kind)


def synthesize_attributes(name: str, st: os.stat_result, is_dir: bool,
                          is_symlink: bool) -> int:
    """Derive Windows-style attribute bits from POSIX stat data.

    Platforms that report real attribute bits (st_file_attributes) have
    them used as-is.
    """
    native = getattr(st, 'st_file_attributes', None)
    if native is not None:
        return native

    attributes = 0
    if is_dir:
        attributes |= FileAttributes.DIRECTORY
    if is_symlink:
        attributes |= FileAttributes.REPARSE_POINT
    if not st.st_mode & _WRITE_BITS:
        attributes |= FileAttributes.READONLY

    flags = getattr(st, 'st_flags', 0)
    if name.startswith('.') or flags & stat.UF_HIDDEN:
        attributes |= FileAttributes.HIDDEN
    if flags & stat.UF_COMPRESSED:
        attributes |= FileAttributes.COMPRESSED
    if flags & stat.SF_ARCHIVED:
        attributes |= FileAttributes.ARCHIVE
    return int(attributes)


def _creation_ns(st: os.stat_result) -> int:
    birthtime = getattr(st, 'st_birthtime', None)
    if birthtime is not None:
        return int(birthtime * 1_000_000_000)
    return st.st_ctime_ns


class ScandirDirectoryReader(DirectoryReader):
    """DirectoryReader using os.scandir.

    Symbolic links to directories are reported as directories carrying
    the REPARSE_POINT bit, the way Windows reports junctions.
    """

    def open(self, path: str, pattern: str, large_fetch: bool = False) -> _ScandirSession:
        try:
            iterator = os.scandir(normalize_path(path))
        except OSError as error:
            raise _listing_error(path, error) from error
        return _ScandirSession(path, iterator)

    def next(self, session: _ScandirSession) -> Optional[RawEntry]:
        while True:
            try:
                entry = next(session.iterator, None)
            except OSError as error:
                raise _listing_error(session.path, error) from error
            if entry is None:
                return None
            try:
                raw = self._to_raw_entry(entry)
            except OSError as error:
                # Entry listed but not statable, e.g. a directory without search permission
                raise _listing_error(session.path, error) from error
            if raw is not None:
                return raw

    def close(self, session: _ScandirSession) -> None:
        session.iterator.close()

    def _to_raw_entry(self, entry: os.DirEntry) -> Optional[RawEntry]:
        try:
            st = entry.stat(follow_symlinks=False)
            is_symlink = entry.is_symlink()
            is_dir = entry.is_dir(follow_symlinks=True)
        except FileNotFoundError:
            # Removed between the listing and the stat call
            return None

        size_high, size_low = split_size(st.st_size)
        return RawEntry(
            name=entry.name,
            attributes=synthesize_attributes(entry.name, st, is_dir, is_symlink),
            size_high=size_high,
            size_low=size_low,
            creation_time=unix_ns_to_filetime(_creation_ns(st)),
            last_access_time=unix_ns_to_filetime(st.st_atime_ns),
            last_write_time=unix_ns_to_filetime(st.st_mtime_ns),
        )
