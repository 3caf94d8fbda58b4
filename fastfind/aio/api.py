"""Async API for FastFind.

Same semantics as ``fastfind.api``: every directory pass runs in a worker
thread via ``asyncio.to_thread`` so the event loop is never blocked, and
the parallel fan-out is an ``asyncio.gather`` over the root's immediate
subdirectories. Recursive calls run with parallelism disabled.
"""

import asyncio
from os import PathLike, fspath
from typing import List, Optional, Union

from .._common.config import FilterMode, FindConfig
from ..core.collector import ResultCollector
from ..core.node import FileInformation
from ..core.reader import DirectoryReader
from ..error_policies import ErrorPolicy
from ..planning import ExecutionPlan


class AsyncFastFind:
    """Runs a validated ExecutionPlan without blocking the event loop."""

    def __init__(self, plan: ExecutionPlan):
        """Initialize with a plan.

        Args:
            plan: Validated ExecutionPlan; its traverser does the listing
        """
        self.plan = plan
        self.config = plan.config
        self.traverser = plan.traverser
        self.semaphore = asyncio.Semaphore(plan.config.performance.max_concurrent)

    async def traverse(self, path: Union[str, PathLike]) -> List[FileInformation]:
        return await self._find(fspath(path),
                                self.config.depth.max_depth,
                                self.config.performance.parallel)

    async def _scan(self, path: str):
        async with self.semaphore:
            return await asyncio.to_thread(self.traverser.scan_directory, path)

    async def _find(self, path: str, remaining: Optional[int],
                    parallel: bool) -> List[FileInformation]:
        results, subdirectories = await self._scan(path)

        depth = self.config.depth
        if not subdirectories or not depth.should_descend(remaining):
            return results

        child_remaining = depth.next_depth(remaining)
        if parallel:
            collector = ResultCollector(results)

            async def visit(subdirectory: str) -> None:
                collector.extend(await self._find(subdirectory, child_remaining, False))

            # Every sibling finishes before the first failure is re-raised
            outcomes = await asyncio.gather(
                *(visit(subdirectory) for subdirectory in subdirectories),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome
        else:
            for subdirectory in subdirectories:
                results.extend(await self._find(subdirectory, child_remaining, False))
        return results


async def find_with_config_async(
    path: Union[str, PathLike],
    config: FindConfig,
    reader: Optional[DirectoryReader] = None,
) -> List[FileInformation]:
    """Enumerate ``path`` with a prepared FindConfig, asynchronously."""
    plan = ExecutionPlan(config, reader)
    return await AsyncFastFind(plan).traverse(path)


async def fast_find_async(
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
    max_concurrent: int = 100,
) -> List[FileInformation]:
    """Async counterpart of ``fastfind.fast_find``.

    Args:
        max_concurrent: Maximum directory listings in flight at once

    See ``fastfind.api.fast_find`` for the other arguments.

    Example:
        >>> results = await fast_find_async("/var/log", "*.log", recurse=True, parallel=True)
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
        max_concurrent=max_concurrent,
    )
    return await find_with_config_async(path, config, reader=reader)
