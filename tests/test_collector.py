"""
Tests for the lock-guarded result collector.
"""

from concurrent.futures import ThreadPoolExecutor

from fastfind import RawEntry, ResultCollector
from fastfind.core.node import classify


def make_info(name):
    return classify(RawEntry(name, 0, 0, 0, 0, 0, 0), "root")


class TestResultCollector:

    def test_accumulates_in_place(self):
        target = [make_info("first")]
        collector = ResultCollector(target)
        collector.extend([make_info("second"), make_info("third")])
        assert collector.results() is target
        assert [info.name for info in target] == ["first", "second", "third"]
        assert len(collector) == 3
        assert collector.merge_count == 1

    def test_starts_empty(self):
        collector = ResultCollector()
        assert collector.results() == []
        assert len(collector) == 0

    def test_concurrent_merges_keep_sub_results_whole(self):
        collector = ResultCollector()
        batches = [[make_info(f"d{d}-{i}") for i in range(20)] for d in range(16)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(collector.extend, batches))

        results = collector.results()
        assert len(results) == 320
        assert collector.merge_count == 16
        # Each batch appears as one contiguous run
        for batch in batches:
            start = results.index(batch[0])
            assert results[start:start + 20] == batch
