"""Result aggregation for FastFind.

Concurrent subdirectory tasks merge their results into one shared list.
Each merge appends a complete sub-result while holding a single lock, so
a subdirectory's contribution is either fully present or not yet present.
"""

import threading
from typing import Iterable, List, Optional

from .node import FileInformation


class ResultCollector:
    """Lock-guarded, growable list of FileInformation records.

    No ordering is guaranteed between contributions merged by different
    threads.
    """

    def __init__(self, initial: Optional[List[FileInformation]] = None):
        """Initialize the collector.

        Args:
            initial: List to accumulate into (used in place, not copied)
        """
        self._results = initial if initial is not None else []
        self._lock = threading.Lock()
        self._merges = 0

    def extend(self, results: Iterable[FileInformation]) -> None:
        """Append one sub-result as a single unit."""
        with self._lock:
            self._results.extend(results)
            self._merges += 1

    def results(self) -> List[FileInformation]:
        """Return the accumulated list."""
        with self._lock:
            return self._results

    @property
    def merge_count(self) -> int:
        with self._lock:
            return self._merges

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
