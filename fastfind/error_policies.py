"""
Error handling policies for FastFind.

A failure to list one directory never aborts an enumeration. What happens
to the failure (reported, collected, or dropped) is decided by an
ErrorPolicy, so callers can choose without touching the scheduler.

Policies are called from worker threads during parallel fan-out and
guard their state with a lock.
"""

import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for handling a directory
    that could not be listed.
    """

    @abstractmethod
    def handle(self, error: Exception, path: str) -> None:
        """
        Handle a listing failure.

        Args:
            error: The exception raised by the reader
            path: Directory that could not be listed
        """
        pass


class _RecordingPolicy(ErrorPolicy):
    """Shared bookkeeping for policies that keep the errors they see."""

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []
        self._lock = threading.Lock()

    def _record(self, error: Exception, path: str) -> Dict[str, Any]:
        error_record = {
            'path': path,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': getattr(error, 'message', None) or str(error),
            'code': getattr(error, 'code', None),
        }
        with self._lock:
            self.errors.append(error_record)
            if path:
                self.skipped_paths.append(path)
        return error_record

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        with self._lock:
            errors = list(self.errors)
            skipped = len(self.skipped_paths)
        return {
            'total_errors': len(errors),
            'permission_errors': sum(1 for e in errors if e['code'] in (5, 13)),
            'skipped_paths': skipped,
            'errors': errors,
        }


class ContinueOnErrorsPolicy(_RecordingPolicy):
    """
    Policy that reports errors and continues the enumeration.

    This is the default when errors are not suppressed. Each failure is
    printed to stderr as "<path>:  <message>" and kept for later inspection.
    """

    def __init__(self, verbose: bool = True, stream=None):
        """
        Initialize the policy.

        Args:
            verbose: If True, print a diagnostic line for every failure
            stream: Where diagnostics go (default: sys.stderr at call time)
        """
        super().__init__()
        self.verbose = verbose
        self.stream = stream

    def handle(self, error: Exception, path: str) -> None:
        record = self._record(error, path)
        if self.verbose:
            stream = self.stream if self.stream is not None else sys.stderr
            print(f"{path}:  {record['error_message']}", file=stream)


class CollectErrorsPolicy(_RecordingPolicy):
    """
    Policy that collects all errors without printing them.

    Useful for presenting every failure at the end of a run.
    """

    def handle(self, error: Exception, path: str) -> None:
        self._record(error, path)


class IgnoreErrorsPolicy(ErrorPolicy):
    """Policy used when errors are suppressed: failures mean "no entries here"."""

    def handle(self, error: Exception, path: str) -> None:
        return None
