"""Tests for result shaping: item cap and table-name filter."""

import re

from bq_mcp_server.shaping import (
    MAX_RESULT_ITEMS,
    cap_items,
    filter_table_names,
    shape_rows,
    shape_table_names,
)


class TestCapItems:
    def test_cap_is_100(self):
        assert MAX_RESULT_ITEMS == 100

    def test_short_sequence_unchanged(self):
        assert cap_items([1, 2, 3]) == [1, 2, 3]

    def test_empty_sequence(self):
        assert cap_items([]) == []

    def test_lengths_around_the_cap(self):
        for n in (0, 1, 99, 100, 101, 150, 1000):
            items = list(range(n))
            capped = cap_items(items)
            assert len(capped) == min(n, 100)
            assert capped == items[: min(n, 100)]

    def test_does_not_mutate_input(self):
        items = list(range(150))
        cap_items(items)
        assert len(items) == 150

    def test_keeps_duplicates_and_order(self):
        items = ["b", "a", "b", "a"]
        assert cap_items(items) == ["b", "a", "b", "a"]


class TestFilterTableNames:
    def test_no_pattern_keeps_everything(self):
        names = ["users", "orders", "logs"]
        assert filter_table_names(names, None) == names

    def test_prefix_pattern(self):
        names = ["users", "orders", "logs"]
        assert filter_table_names(names, re.compile("^u.*")) == ["users"]

    def test_match_is_unanchored(self):
        names = ["daily_events", "events_raw", "users"]
        assert filter_table_names(names, re.compile("events")) == [
            "daily_events",
            "events_raw",
        ]

    def test_preserves_relative_order(self):
        names = ["t3", "x1", "t1", "t2"]
        assert filter_table_names(names, re.compile(r"^t\d$")) == ["t3", "t1", "t2"]

    def test_no_matches(self):
        assert filter_table_names(["a", "b"], re.compile("^z")) == []


class TestShapeTableNames:
    def test_filter_applies_before_cap(self):
        names = [f"x{i}" for i in range(150)] + [f"u{i}" for i in range(10)]
        shaped = shape_table_names(names, re.compile("^u"))
        assert shaped == [f"u{i}" for i in range(10)]

    def test_cap_after_filter(self):
        names = [f"u{i}" for i in range(150)]
        shaped = shape_table_names(names, re.compile("^u"))
        assert shaped == names[:100]

    def test_idempotent(self):
        pattern = re.compile("^u")
        names = [f"u{i}" for i in range(150)] + ["orders"]
        once = shape_table_names(names, pattern)
        assert shape_table_names(once, pattern) == once


class TestShapeRows:
    def test_rows_are_capped_not_filtered(self):
        rows = [{"id": str(i)} for i in range(150)]
        shaped = shape_rows(rows)
        assert len(shaped) == 100
        assert shaped[0] == {"id": "0"}
        assert shaped[-1] == {"id": "99"}

    def test_idempotent(self):
        rows = [{"id": i} for i in range(150)]
        once = shape_rows(rows)
        assert shape_rows(once) == once
