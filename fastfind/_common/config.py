"""Configuration system for FastFind.

This module defines how callers describe an enumeration: the name pattern,
which entry kinds and attribute bits they want, how deep to recurse and
whether to fan work out across subdirectories.
"""

from dataclasses import dataclass, field, fields
from enum import Enum, IntFlag
from typing import Optional, Any, List, Union


class FileAttributes(IntFlag):
    """Filesystem attribute bits, using the Windows numbering.

    Bits not named here are carried through untouched.
    """
    NONE = 0
    READONLY = 0x1
    HIDDEN = 0x2
    SYSTEM = 0x4
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    DEVICE = 0x40
    NORMAL = 0x80
    TEMPORARY = 0x100
    SPARSE_FILE = 0x200
    REPARSE_POINT = 0x400
    COMPRESSED = 0x800
    OFFLINE = 0x1000
    NOT_CONTENT_INDEXED = 0x2000
    ENCRYPTED = 0x4000


class FilterMode(Enum):
    """How an entry's attributes are compared against the requested mask."""
    INCLUDE = "Include"    # every requested bit present
    EXCLUDE = "Exclude"    # not every requested bit present
    STRICT = "Strict"      # attributes exactly equal to the mask

    @classmethod
    def coerce(cls, value: Union['FilterMode', str, None]) -> Optional['FilterMode']:
        """Turn a member or a name/value string into a FilterMode.

        Args:
            value: FilterMode member, or a string such as "Include" or "strict"

        Returns:
            Matching FilterMode, or None if the value is not recognized
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for mode in cls:
            if wanted in (mode.value.lower(), mode.name.lower()):
                return mode
        return None


@dataclass
class AttributeFilter:
    """Entry-kind and attribute toggles for one enumeration."""

    include_files: bool = True
    include_directories: bool = False

    hidden: bool = False
    system: bool = False
    read_only: bool = False
    compressed: bool = False
    archive: bool = False
    reparse_point: bool = False

    mode: Union[FilterMode, str] = FilterMode.INCLUDE

    @property
    def files_only(self) -> bool:
        """True when files are requested and directories are not."""
        return self.include_files and not self.include_directories

    def mask(self) -> FileAttributes:
        """Build the attribute mask from the toggles that are set."""
        mask = FileAttributes.NONE
        if self.include_directories:
            mask |= FileAttributes.DIRECTORY
        if self.hidden:
            mask |= FileAttributes.HIDDEN
        if self.system:
            mask |= FileAttributes.SYSTEM
        if self.read_only:
            mask |= FileAttributes.READONLY
        if self.compressed:
            mask |= FileAttributes.COMPRESSED
        if self.archive:
            mask |= FileAttributes.ARCHIVE
        if self.reparse_point:
            mask |= FileAttributes.REPARSE_POINT
        return mask


@dataclass
class DepthConfig:
    """Recursion control.

    ``max_depth`` counts levels below the root: 0 lists the root only,
    N descends exactly N levels. None means no bound.
    """

    recurse: bool = False
    max_depth: Optional[int] = None

    def should_descend(self, remaining: Optional[int]) -> bool:
        """Check whether subdirectories of the current level are visited.

        Args:
            remaining: Levels still allowed below the current one (None = unbounded)

        Returns:
            True if the scheduler should recurse
        """
        if not self.recurse:
            return False
        return remaining is None or remaining > 0

    @staticmethod
    def next_depth(remaining: Optional[int]) -> Optional[int]:
        """Remaining depth handed to the recursive call."""
        return None if remaining is None else remaining - 1


@dataclass
class PerformanceConfig:
    """Concurrency and listing hints."""

    parallel: bool = False                # fan out over the root's subdirectories
    max_workers: Optional[int] = None     # thread pool bound for one fan-out
    large_fetch: bool = False             # batched listing hint, no effect on results
    max_concurrent: int = 100             # in-flight listings (async API only)


@dataclass
class FindConfig:
    """Complete configuration for one enumeration.

    This is validated once per invocation by the ExecutionPlan before any
    directory is opened.
    """

    pattern: str = "*"
    attributes: AttributeFilter = field(default_factory=AttributeFilter)
    depth: DepthConfig = field(default_factory=DepthConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    # Error handling
    suppress_errors: bool = False
    error_policy: Optional[Any] = None  # ErrorPolicy instance

    @classmethod
    def from_options(cls,
                     pattern: Optional[str] = "*",
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
                     error_policy: Optional[Any] = None,
                     max_workers: Optional[int] = None,
                     max_concurrent: int = 100) -> 'FindConfig':
        """Create a config from the flat parameter list of ``fast_find``.

        A pattern of None is treated as "*".
        """
        return cls(
            pattern="*" if pattern is None else pattern,
            attributes=AttributeFilter(
                include_files=include_files,
                include_directories=include_directories,
                hidden=include_hidden,
                system=include_system,
                read_only=include_read_only,
                compressed=include_compressed,
                archive=include_archive,
                reparse_point=include_reparse_point,
                mode=filter_mode,
            ),
            depth=DepthConfig(recurse=recurse, max_depth=max_depth),
            performance=PerformanceConfig(
                parallel=parallel,
                max_workers=max_workers,
                large_fetch=large_fetch,
                max_concurrent=max_concurrent,
            ),
            suppress_errors=suppress_errors,
            error_policy=error_policy,
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.pattern, str) or not self.pattern.strip():
            errors.append("pattern must be a non-empty string")

        if self.depth.max_depth is not None:
            if isinstance(self.depth.max_depth, bool) or not isinstance(self.depth.max_depth, int):
                errors.append("max_depth must be an integer or None")
            elif self.depth.max_depth < 0:
                errors.append("max_depth cannot be negative")

        if self.performance.max_workers is not None and self.performance.max_workers <= 0:
            errors.append("max_workers must be positive")

        if self.performance.max_concurrent <= 0:
            errors.append("max_concurrent must be positive")

        return errors

    def summary(self) -> dict:
        """Flat view of the configuration, for diagnostics."""
        flat = {'pattern': self.pattern, 'suppress_errors': self.suppress_errors}
        for section in (self.attributes, self.depth, self.performance):
            for item in fields(section):
                flat[item.name] = getattr(section, item.name)
        flat['mask'] = int(self.attributes.mask())
        return flat
