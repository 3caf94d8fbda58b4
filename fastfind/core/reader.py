"""DirectoryReader abstraction for FastFind.

A DirectoryReader wraps one platform's batched directory-listing primitive
behind an open/next/close session interface. The scheduler and filter
engine only ever talk to this interface, which keeps them portable.
"""

from abc import ABC, abstractmethod
from collections import namedtuple
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional


# One raw entry as reported by the native listing call.
# Times are FILETIME ticks: 100 ns intervals since 1601-01-01 UTC.
RawEntry = namedtuple('RawEntry', [
    'name',
    'attributes',
    'size_high',
    'size_low',
    'creation_time',
    'last_access_time',
    'last_write_time',
])


class ListingErrorKind(Enum):
    """Classification of a failed listing call."""
    NOT_FOUND = "not_found"          # path missing or nothing matches
    NO_MORE_FILES = "no_more_files"  # listing is empty
    OTHER = "other"                  # unexpected failure


class DirectoryListingError(OSError):
    """Raised by a DirectoryReader when a listing cannot be opened or continued."""

    def __init__(self, path: str, message: str, code: Optional[int] = None,
                 kind: ListingErrorKind = ListingErrorKind.OTHER):
        super().__init__(code, message, path)
        self.path = path
        self.message = message
        self.code = code
        self.kind = kind

    @property
    def expected_empty(self) -> bool:
        """True for failures that just mean "no entries here"."""
        return self.kind in (ListingErrorKind.NOT_FOUND, ListingErrorKind.NO_MORE_FILES)

    def __str__(self) -> str:
        return f"{self.path}:  {self.message}"


class NativeError(OSError):
    """A single-entity filesystem query failed with a native error code."""

    def __init__(self, code: Optional[int], message: str, path: Optional[str] = None):
        super().__init__(code, message, path)
        self.code = code
        self.message = message
        self.path = path


class DirectoryReader(ABC):
    """Abstract reader for one platform's directory listing primitive.

    Sessions are opaque to the caller. Every session returned by open()
    must be passed to close() exactly once; listing() does that for you.
    """

    @abstractmethod
    def open(self, path: str, pattern: str, large_fetch: bool = False) -> Any:
        """Begin listing the entries of a directory.

        Readers that cannot pre-filter by pattern list every entry; the
        caller always re-filters.

        Args:
            path: Directory to list
            pattern: Name pattern the OS may use to pre-filter
            large_fetch: Hint to use larger listing batches

        Returns:
            Opaque session object

        Raises:
            DirectoryListingError: If the listing cannot be opened
        """
        pass

    @abstractmethod
    def next(self, session: Any) -> Optional[RawEntry]:
        """Read the next entry of a session.

        Args:
            session: Session returned by open()

        Returns:
            Next RawEntry, or None when the listing is exhausted

        Raises:
            DirectoryListingError: If the listing fails part way
        """
        pass

    @abstractmethod
    def close(self, session: Any) -> None:
        """Release the resources held by a session."""
        pass

    @contextmanager
    def listing(self, path: str, pattern: str = "*",
                large_fetch: bool = False) -> Iterator[Iterator[RawEntry]]:
        """Open a session and yield an iterator over its entries.

        The session is closed on every exit path, including exceptions
        raised by the caller while iterating.

        Example:
            with reader.listing("/data") as entries:
                for raw in entries:
                    ...
        """
        session = self.open(path, pattern, large_fetch)
        try:
            yield self._iterate(session)
        finally:
            self.close(session)

    def _iterate(self, session: Any) -> Iterator[RawEntry]:
        while True:
            raw = self.next(session)
            if raw is None:
                return
            yield raw

    # Capability flags - readers declare what they support

    def supports_pattern_prefilter(self) -> bool:
        """Check if the OS filters names by pattern before returning them."""
        return False

    def supports_large_fetch(self) -> bool:
        """Check if the large_fetch hint changes how the OS lists entries."""
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
