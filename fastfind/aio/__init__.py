"""Asynchronous implementation of FastFind.

Directory listings run in worker threads so enumeration can be awaited
from an event loop alongside other I/O.
"""

from .api import (
    AsyncFastFind,
    fast_find_async,
    find_with_config_async,
)

__all__ = [
    'AsyncFastFind',
    'fast_find_async',
    'find_with_config_async',
]
