"""FastFind - Fast Directory Tree Enumeration.

FastFind lists directory trees through each platform's batched native
listing call (FindFirstFileExW on Windows, os.scandir elsewhere) and
returns a FileInformation record for every entry that matches a name
pattern and an attribute filter.

Choose your implementation:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Synchronous:
    from fastfind import fast_find

Asynchronous:
    from fastfind.aio import fast_find_async
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from ._common.config import (
    FileAttributes,
    FilterMode,
    AttributeFilter,
    DepthConfig,
    PerformanceConfig,
    FindConfig,
)
from .core import (
    RawEntry,
    DirectoryReader,
    DirectoryListingError,
    ListingErrorKind,
    NativeError,
    FileInformation,
    ResultCollector,
    FastFindTraverser,
)
from .adapters import ScandirDirectoryReader, default_reader
from .error_policies import (
    ErrorPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    IgnoreErrorsPolicy,
)
from .planning import ExecutionPlan, ConfigurationError
from .api import (
    fast_find,
    find_with_config,
    find_files,
    find_directories,
    count_entries,
    total_size,
)
from .fileinfo import get_attributes, get_owner, get_sector_size
from .paths import to_extended_length_path, normalize_path
from . import aio

__all__ = [
    "__version__",
    # Config
    "FileAttributes",
    "FilterMode",
    "AttributeFilter",
    "DepthConfig",
    "PerformanceConfig",
    "FindConfig",
    # Core
    "RawEntry",
    "DirectoryReader",
    "DirectoryListingError",
    "ListingErrorKind",
    "NativeError",
    "FileInformation",
    "ResultCollector",
    "FastFindTraverser",
    # Readers
    "ScandirDirectoryReader",
    "default_reader",
    # Error policies
    "ErrorPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
    "IgnoreErrorsPolicy",
    # Planning
    "ExecutionPlan",
    "ConfigurationError",
    # API
    "fast_find",
    "find_with_config",
    "find_files",
    "find_directories",
    "count_entries",
    "total_size",
    # Single-entity queries
    "get_attributes",
    "get_owner",
    "get_sector_size",
    # Paths
    "to_extended_length_path",
    "normalize_path",
    "aio",
]
