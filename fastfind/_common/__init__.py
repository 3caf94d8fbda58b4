"""Common components shared between the sync and aio implementations.

This internal package contains non-I/O code that is identical between
both implementations. It should NOT be imported directly by users.

Important: This package must NEVER import from core, adapters or aio to
avoid circular dependencies.
"""

from .config import (
    FileAttributes,
    FilterMode,
    AttributeFilter,
    DepthConfig,
    PerformanceConfig,
    FindConfig,
)

__all__ = [
    'FileAttributes',
    'FilterMode',
    'AttributeFilter',
    'DepthConfig',
    'PerformanceConfig',
    'FindConfig',
]
