"""Recursive enumeration for FastFind.

The traverser lists one directory at a time through a DirectoryReader,
filters and classifies the entries, then recurses into the
subdirectories it found. Recursion is either sequential or, at a level
where the caller asked for it, fanned out over a thread pool with one
task per immediate subdirectory.

Parallelism is a flag threaded through every call: recursive calls are
always issued with it disabled, so concurrency is one level deep per
call chain.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from .._common.config import FileAttributes, FindConfig
from ..error_policies import ErrorPolicy, IgnoreErrorsPolicy
from .collector import ResultCollector
from .filtering import matches_filter
from .node import FileInformation, classify, is_navigation_entry
from .reader import DirectoryListingError, DirectoryReader


class FastFindTraverser:
    """Depth-bounded recursive directory enumerator."""

    def __init__(self,
                 reader: DirectoryReader,
                 config: FindConfig,
                 policy: Optional[ErrorPolicy] = None):
        """Initialize traverser.

        Args:
            reader: DirectoryReader for the target platform
            config: Validated FindConfig
            policy: What to do with directories that cannot be listed
        """
        self.reader = reader
        self.config = config
        self.policy = policy or IgnoreErrorsPolicy()

    def traverse(self, path: str) -> List[FileInformation]:
        """Enumerate ``path`` according to the configuration.

        Args:
            path: Root directory

        Returns:
            Every matching entry at or below the root, within the depth bound
        """
        return self._find(path,
                          self.config.depth.max_depth,
                          self.config.performance.parallel)

    def _find(self, path: str, remaining: Optional[int],
              parallel: bool) -> List[FileInformation]:
        results, subdirectories = self.scan_directory(path)

        depth = self.config.depth
        if not subdirectories or not depth.should_descend(remaining):
            return results

        child_remaining = depth.next_depth(remaining)
        if parallel:
            self._fan_out(results, subdirectories, child_remaining)
        else:
            for subdirectory in subdirectories:
                results.extend(self._find(subdirectory, child_remaining, False))
        return results

    def _fan_out(self, results: List[FileInformation],
                 subdirectories: List[str],
                 remaining: Optional[int]) -> None:
        """Visit subdirectories concurrently, merging into ``results``.

        Blocks until every task has finished; the first task exception,
        if any, is re-raised here.
        """
        collector = ResultCollector(results)

        def visit(subdirectory: str) -> None:
            collector.extend(self._find(subdirectory, remaining, False))

        max_workers = self.config.performance.max_workers
        if max_workers is not None:
            max_workers = min(max_workers, len(subdirectories))

        with ThreadPoolExecutor(max_workers=max_workers,
                                thread_name_prefix="fastfind") as pool:
            futures = [pool.submit(visit, subdirectory) for subdirectory in subdirectories]
            for future in futures:
                future.result()

    def scan_directory(self, path: str) -> Tuple[List[FileInformation], List[str]]:
        """Run one enumeration pass over a single directory.

        Args:
            path: Directory to list

        Returns:
            Tuple of (matching entries, subdirectory paths to descend into)
        """
        config = self.config
        attribute_filter = config.attributes
        files_only = attribute_filter.files_only
        recurse = config.depth.recurse

        results: List[FileInformation] = []
        subdirectories: List[str] = []

        try:
            with self.reader.listing(path, config.pattern,
                                     config.performance.large_fetch) as entries:
                for raw in entries:
                    if is_navigation_entry(raw.name):
                        continue

                    is_directory = bool(raw.attributes & FileAttributes.DIRECTORY)

                    # Queued whether or not the directory itself matches.
                    if is_directory and recurse:
                        subdirectories.append(os.path.join(path, raw.name))

                    if files_only and is_directory:
                        continue

                    if matches_filter(raw.name, raw.attributes, config.pattern,
                                      attribute_filter):
                        results.append(classify(raw, path))
        except DirectoryListingError as error:
            if not error.expected_empty and not config.suppress_errors:
                self.policy.handle(error, path)

        return results, subdirectories
