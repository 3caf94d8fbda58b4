"""Testing utilities for FastFind consumers."""

from .fixtures import InMemoryDirectoryReader, DEFAULT_FILETIME

__all__ = ['InMemoryDirectoryReader', 'DEFAULT_FILETIME']
