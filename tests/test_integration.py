"""
Integration tests for the fixed-size hash table.

Tests cover end-to-end workflows combining generated data with the table.
"""

import pytest

from data.generate import KeyValueGenerator
from src.data_structures.fixed_hash_table import (
    CapacityExceededError,
    FixedHashTable,
    create,
    delete,
    destroy,
    insert,
    search,
)


class TestIntegrationWorkflows:
    """Integration tests for complete workflows."""

    def test_generated_pairs_round_trip(self):
        """Test generated pairs survive a fill to capacity."""
        generator = KeyValueGenerator(seed=42)
        pairs = list(generator.generate_pairs(53))

        table = create()
        try:
            for key, value in pairs:
                insert(table, key, value)

            assert table.count == 53
            for key, value in pairs:
                assert search(table, key) == value
        finally:
            destroy(table)

    def test_fill_overflow_drain_refill(self):
        """Test overflow, then tombstone reuse after draining half."""
        generator = KeyValueGenerator(seed=7)
        pairs = list(generator.generate_pairs(80))
        first, rest = pairs[:53], pairs[53:]

        with FixedHashTable() as table:
            for key, value in first:
                table.insert(key, value)

            with pytest.raises(CapacityExceededError):
                table.insert(*rest[0])

            drained = first[::2]
            for key, _ in drained:
                assert delete(table, key) is True
            assert table.count == 53 - len(drained)
            assert table.tombstone_count == len(drained)

            refill = rest[: len(drained)]
            for key, value in refill:
                table.insert(key, value)

            assert table.count == 53
            for key, _ in drained:
                assert table.search(key) is None
            for key, value in first[1::2] + refill:
                assert table.search(key) == value

    def test_overwrite_generated_values(self):
        """Test overwriting every key keeps the count stable."""
        generator = KeyValueGenerator(seed=11)
        pairs = list(generator.generate_pairs(30))

        with FixedHashTable(31) as table:
            for key, value in pairs:
                table.insert(key, value)
            for key, value in pairs:
                table.insert(key, value.upper())

            assert table.count == 30
            for key, value in pairs:
                assert table[key] == value.upper()

    def test_stats_after_workflow(self):
        """Test statistics after a mixed workflow."""
        generator = KeyValueGenerator(seed=13)
        pairs = list(generator.generate_pairs(20))
        missing = list(generator.generate_missing_keys(5, {k for k, _ in pairs}))

        with FixedHashTable() as table:
            for key, value in pairs:
                table.insert(key, value)
            for key in missing:
                assert table.search(key) is None
                assert table.delete(key) is False

            stats = table.get_stats()
            assert stats["count"] == 20
            assert stats["tombstones"] == 0
            assert stats["total_operations"] == 30
            assert stats["failed_inserts"] == 0
