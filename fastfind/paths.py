"""Extended-length path handling.

Windows limits ordinary paths to MAX_PATH (260) characters. Prefixing an
absolute path with ``\\\\?\\`` (or ``\\\\?\\UNC\\`` for network shares)
lifts the limit to about 32,767 characters. Other platforms have no such
prefix and get their paths back unchanged.
"""

import ntpath
import sys
from typing import Union
from os import PathLike, fspath


LONG_PATH_PREFIX = '\\\\?\\'
UNC_PATH_PREFIX = '\\\\?\\UNC\\'
DEVICE_PATH_PREFIX = '\\\\.\\'


def to_extended_length_path(path: Union[str, PathLike]) -> str:
    """Rewrite a Windows path into its extended-length form.

    Examples:
        C:\\data            -> \\\\?\\C:\\data
        \\\\server\\share   -> \\\\?\\UNC\\server\\share
        \\\\?\\C:\\data      -> unchanged

    Relative paths are made absolute first, because the prefix disables
    relative path resolution.

    Args:
        path: Windows path

    Returns:
        Prefixed path
    """
    path = fspath(path).replace('/', '\\')
    if path.startswith(LONG_PATH_PREFIX) or path.startswith(DEVICE_PATH_PREFIX):
        return path
    if path.startswith('\\\\'):
        return UNC_PATH_PREFIX + path[2:]
    return LONG_PATH_PREFIX + ntpath.abspath(path)


def normalize_path(path: Union[str, PathLike]) -> str:
    """Return the form of ``path`` handed to the native reader on this platform."""
    if sys.platform == 'win32':
        return to_extended_length_path(path)
    return fspath(path)
