"""Single-entity filesystem queries.

These are independent of the traversal engine: each normalizes the path,
makes one native query and raises NativeError (carrying the native error
code) on failure. Failures are never suppressed or retried.
"""

import os
import stat
import sys
from os import PathLike, fspath
from typing import Union

from ._common.config import FileAttributes
from .adapters.scandir import synthesize_attributes
from .core.reader import NativeError
from .paths import normalize_path


def _native_error(error: OSError, path: str) -> NativeError:
    return NativeError(error.errno, error.strerror or str(error), path)


def get_attributes(path: Union[str, PathLike]) -> FileAttributes:
    """Return the attribute bits of a file or directory.

    Raises:
        NativeError: If the path cannot be queried
    """
    path = fspath(path)
    if sys.platform == 'win32':
        from .adapters.win32 import get_file_attributes
        return FileAttributes(get_file_attributes(path))

    try:
        st = os.lstat(normalize_path(path))
        is_dir = os.path.isdir(path)
    except OSError as error:
        raise _native_error(error, path) from error
    name = os.path.basename(os.path.normpath(path))
    return FileAttributes(synthesize_attributes(name, st, is_dir, stat.S_ISLNK(st.st_mode)))


def get_owner(path: Union[str, PathLike]) -> str:
    """Return the account name owning a file or directory.

    On Windows this is ``DOMAIN\\account``, falling back to the SID string
    when the account cannot be resolved. On POSIX it is the user name,
    falling back to the numeric uid.

    Raises:
        NativeError: If the owner cannot be read
    """
    path = fspath(path)
    if sys.platform == 'win32':
        from .adapters.win32 import get_file_owner
        return get_file_owner(path)

    import pwd

    try:
        uid = os.lstat(normalize_path(path)).st_uid
    except OSError as error:
        raise _native_error(error, path) from error
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def get_sector_size(path: Union[str, PathLike]) -> int:
    """Return the allocation unit (cluster) size, in bytes, of the volume holding ``path``.

    Raises:
        NativeError: If the volume cannot be queried
    """
    path = fspath(path)
    if sys.platform == 'win32':
        from .adapters.win32 import get_cluster_size
        return get_cluster_size(path)

    try:
        st = os.statvfs(normalize_path(path))
    except OSError as error:
        raise _native_error(error, path) from error
    return st.f_frsize or st.f_bsize
