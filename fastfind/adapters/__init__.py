"""Directory readers for specific platforms.

Readers implement the DirectoryReader interface on top of one platform's
listing primitive. ``default_reader()`` picks the fastest one available.
"""

import sys

from .scandir import ScandirDirectoryReader
from ..core.reader import DirectoryReader


def default_reader() -> DirectoryReader:
    """Return the native reader for the running platform."""
    if sys.platform == 'win32':
        from .win32 import Win32DirectoryReader
        return Win32DirectoryReader()
    return ScandirDirectoryReader()


__all__ = [
    "ScandirDirectoryReader",
    "default_reader",
]
