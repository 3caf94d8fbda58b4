"""High-level API for FastFind.

This module provides simple, functional interfaces for enumerating
directory trees. They wrap FindConfig and ExecutionPlan for the common
cases.
"""

from os import PathLike
from typing import List, Optional, Union

from ._common.config import FilterMode, FindConfig
from .core.node import FileInformation
from .core.reader import DirectoryReader
from .error_policies import ErrorPolicy
from .planning import ExecutionPlan


def fast_find(
    path: Union[str, PathLike],
    pattern: str = "*",
    *,
    include_files: bool = True,
    include_directories: bool = False,
    recurse: bool = False,
    max_depth: Optional[int] = None,
    parallel: bool = False,
    suppress_errors: bool = False,
    large_fetch: bool = False,
    include_hidden: bool = False,
    include_system: bool = False,
    include_read_only: bool = False,
    include_compressed: bool = False,
    include_archive: bool = False,
    include_reparse_point: bool = False,
    filter_mode: Union[FilterMode, str] = FilterMode.INCLUDE,
    reader: Optional[DirectoryReader] = None,
    error_policy: Optional[ErrorPolicy] = None,
    max_workers: Optional[int] = None,
) -> List[FileInformation]:
    """Enumerate a directory and return metadata for every matching entry.

    This is the primary high-level function. The attribute toggles build
    a mask (directories requested adds the DIRECTORY bit) that entries
    are compared against according to ``filter_mode``:

    - Include: every requested bit is set on the entry
    - Exclude: not every requested bit is set
    - Strict: the entry's attributes equal the mask exactly

    Directories are always descended into when ``recurse`` is set, even
    when they are excluded from the results.

    Args:
        path: Root directory
        pattern: Wildcard name pattern (``*`` and ``?``, case-insensitive)
        include_files: Request files
        include_directories: Request directories
        recurse: Descend into subdirectories
        max_depth: Levels below the root to visit (None = unbounded)
        parallel: List the root's subdirectories concurrently
        suppress_errors: Treat unreadable directories as empty, silently
        large_fetch: Listing performance hint; never changes results
        include_hidden: Require/exclude the HIDDEN bit
        include_system: Require/exclude the SYSTEM bit
        include_read_only: Require/exclude the READONLY bit
        include_compressed: Require/exclude the COMPRESSED bit
        include_archive: Require/exclude the ARCHIVE bit
        include_reparse_point: Require/exclude the REPARSE_POINT bit
        filter_mode: Include, Exclude or Strict
        reader: DirectoryReader to use (default: native reader)
        error_policy: What to do with unreadable directories when not suppressed
        max_workers: Thread bound for the parallel fan-out

    Returns:
        List of FileInformation. Order follows the native listing order
        for sequential runs and is unspecified for parallel runs.

    Raises:
        ConfigurationError: If the options are inconsistent

    Example:
        >>> for info in fast_find("C:\\\\logs", "*.log", recurse=True, max_depth=2):
        ...     print(info.path, info.file_size)
    """
    config = FindConfig.from_options(
        pattern=pattern,
        include_files=include_files,
        include_directories=include_directories,
        recurse=recurse,
        max_depth=max_depth,
        parallel=parallel,
        suppress_errors=suppress_errors,
        large_fetch=large_fetch,
        include_hidden=include_hidden,
        include_system=include_system,
        include_read_only=include_read_only,
        include_compressed=include_compressed,
        include_archive=include_archive,
        include_reparse_point=include_reparse_point,
        filter_mode=filter_mode,
        error_policy=error_policy,
        max_workers=max_workers,
    )
    return find_with_config(path, config, reader=reader)


def find_with_config(
    path: Union[str, PathLike],
    config: FindConfig,
    reader: Optional[DirectoryReader] = None,
) -> List[FileInformation]:
    """Enumerate ``path`` with a prepared FindConfig."""
    plan = ExecutionPlan(config, reader)
    return plan.execute(path)


def find_files(
    path: Union[str, PathLike],
    pattern: str = "*",
    recurse: bool = True,
    **kwargs
) -> List[FileInformation]:
    """Find files (never directories) matching a pattern.

    Example:
        >>> python_files = find_files("/src", "*.py")
    """
    kwargs.update(include_files=True, include_directories=False)
    return fast_find(path, pattern, recurse=recurse, **kwargs)


def find_directories(
    path: Union[str, PathLike],
    pattern: str = "*",
    recurse: bool = True,
    **kwargs
) -> List[FileInformation]:
    """Find directories matching a pattern."""
    kwargs.update(include_files=False, include_directories=True)
    return fast_find(path, pattern, recurse=recurse, **kwargs)


def count_entries(path: Union[str, PathLike], pattern: str = "*", **kwargs) -> int:
    """Count matching entries."""
    return len(fast_find(path, pattern, **kwargs))


def total_size(path: Union[str, PathLike], pattern: str = "*", **kwargs) -> int:
    """Sum the sizes of matching files."""
    return sum(info.file_size for info in fast_find(path, pattern, **kwargs) if info.is_leaf())
