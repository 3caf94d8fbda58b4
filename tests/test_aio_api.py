"""
Tests for the async API.
"""

import asyncio
import os

import pytest

from fastfind import CollectErrorsPolicy, ConfigurationError, FindConfig, fast_find
from fastfind.aio import AsyncFastFind, fast_find_async, find_with_config_async
from fastfind.planning import ExecutionPlan
from fastfind.testing import InMemoryDirectoryReader


TREE = {
    "a.txt": 10,
    "b.log": 20,
    "d1": {"r1.txt": 1, "deep": {"x.txt": 5}},
    "d2": {"r2.txt": 2},
    "d3": {"r3.txt": 3},
}


def names(results):
    return sorted(info.name for info in results)


class TestFastFindAsync:

    @pytest.mark.asyncio
    async def test_matches_sync_results(self):
        expected = fast_find("root", "*.txt", recurse=True,
                             reader=InMemoryDirectoryReader.from_tree("root", TREE))
        results = await fast_find_async("root", "*.txt", recurse=True,
                                        reader=InMemoryDirectoryReader.from_tree("root", TREE))
        assert names(results) == names(expected)

    @pytest.mark.asyncio
    async def test_parallel_union(self):
        reader = InMemoryDirectoryReader.from_tree("root", TREE, open_delay=0.01)
        results = await fast_find_async("root", "r?.txt", recurse=True, parallel=True,
                                        reader=reader)
        assert names(results) == ["r1.txt", "r2.txt", "r3.txt"]
        assert reader.open_sessions == 0
        assert reader.closed_sessions == 5

    @pytest.mark.asyncio
    async def test_depth_bound(self):
        reader = InMemoryDirectoryReader.from_tree("root", TREE)
        results = await fast_find_async("root", "*.txt", recurse=True, max_depth=1,
                                        reader=reader)
        assert names(results) == ["a.txt", "r1.txt", "r2.txt", "r3.txt"]
        assert os.path.join("root", "d1", "deep") not in reader.opened_paths

    @pytest.mark.asyncio
    async def test_max_concurrent_bounds_listings(self):
        reader = InMemoryDirectoryReader.from_tree("root", TREE, open_delay=0.02)
        await fast_find_async("root", recurse=True, parallel=True, max_concurrent=1,
                              reader=reader)
        assert reader.peak_open_sessions == 1

    @pytest.mark.asyncio
    async def test_errors_go_to_policy(self):
        reader = InMemoryDirectoryReader.from_tree("root", TREE)
        reader.fail("root/d2")
        policy = CollectErrorsPolicy()
        results = await fast_find_async("root", "*.txt", recurse=True, parallel=True,
                                        error_policy=policy, reader=reader)
        assert "r2.txt" not in names(results)
        assert [error['path'] for error in policy.errors] == [os.path.join("root", "d2")]

    @pytest.mark.asyncio
    async def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            await fast_find_async("root", max_concurrent=0,
                                  reader=InMemoryDirectoryReader.from_tree("root", TREE))

    @pytest.mark.asyncio
    async def test_event_loop_not_blocked(self):
        reader = InMemoryDirectoryReader.from_tree("root", TREE, open_delay=0.02)
        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                ticks += 1
                await asyncio.sleep(0.005)

        task = asyncio.create_task(ticker())
        try:
            await fast_find_async("root", recurse=True, reader=reader)
        finally:
            task.cancel()
        assert ticks > 1

    @pytest.mark.asyncio
    async def test_unexpected_error_waits_for_siblings(self):
        broken = os.path.join("root", "d1")

        class BrokenReader(InMemoryDirectoryReader):
            def open(self, path, pattern, large_fetch=False):
                if path == broken:
                    raise RuntimeError("reader bug")
                return super().open(path, pattern, large_fetch)

        reader = BrokenReader.from_tree("root", TREE, open_delay=0.05)
        with pytest.raises(RuntimeError, match="reader bug"):
            await fast_find_async("root", recurse=True, parallel=True, reader=reader)
        assert os.path.join("root", "d2") in reader.opened_paths
        assert os.path.join("root", "d3") in reader.opened_paths
        assert reader.open_sessions == 0


class TestFindWithConfigAsync:

    @pytest.mark.asyncio
    async def test_with_config(self):
        config = FindConfig.from_options(pattern="*.log")
        reader = InMemoryDirectoryReader.from_tree("root", TREE)
        assert names(await find_with_config_async("root", config, reader=reader)) == ["b.log"]

    @pytest.mark.asyncio
    async def test_traverser_from_plan(self):
        plan = ExecutionPlan(FindConfig.from_options(recurse=True),
                             InMemoryDirectoryReader.from_tree("root", TREE))
        finder = AsyncFastFind(plan)
        assert finder.traverser is plan.traverser
        assert len(await finder.traverse("root")) == 6
