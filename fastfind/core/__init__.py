"""Core abstractions for FastFind.

This package contains the reader interface, the FileInformation record,
the filter engine, the result collector and the recursive traverser.
"""

from .reader import (
    RawEntry,
    DirectoryReader,
    DirectoryListingError,
    ListingErrorKind,
    NativeError,
)
from .node import FileInformation, classify, combine_size, filetime_to_datetime
from .filtering import match_pattern, attributes_match, matches_filter
from .collector import ResultCollector
from .traverser import FastFindTraverser

__all__ = [
    "RawEntry",
    "DirectoryReader",
    "DirectoryListingError",
    "ListingErrorKind",
    "NativeError",
    "FileInformation",
    "classify",
    "combine_size",
    "filetime_to_datetime",
    "match_pattern",
    "attributes_match",
    "matches_filter",
    "ResultCollector",
    "FastFindTraverser",
]
