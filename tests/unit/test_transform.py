"""Unit tests for source loading and flattening.

These tests validate:
1. Every subject with a keywords list becomes exactly one record
2. Subjects without a keywords list are skipped and counted, never raised
3. style_modifiers defaults to an empty list
4. Unreadable or malformed sources raise SourceLoadError
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from src.quiz_data import SourceLoadError, flatten_source, load_source, parse_source

FIXED_NOW = datetime(2025, 11, 14, 12, 0, tzinfo=timezone.utc)


class TestFlattenSource:
    """Tests for flatten_source."""

    def test_single_subject_produces_one_record(self) -> None:
        result = flatten_source({"A": {"S1": {"keywords": ["k1", "k2"]}}}, now=FIXED_NOW)

        assert result.record_count == 1
        record = result.records[0]
        assert record.category == "A"
        assert record.subject == "S1"
        assert record.keywords == ["k1", "k2"]
        assert record.style_modifiers == []

    def test_missing_keywords_produces_no_records(self) -> None:
        result = flatten_source({"A": {"S1": {"notkeywords": []}}})

        assert result.record_count == 0
        assert result.skipped_subjects == [("A", "S1")]

    def test_record_count_matches_eligible_subjects(self, sample_source: dict[str, Any]) -> None:
        result = flatten_source(sample_source)

        assert result.record_count == 3
        assert result.subject_count == 4
        assert result.category_count == 2
        assert result.skipped_count == 1

    @pytest.mark.parametrize(
        "content",
        [
            {"keywords": "docker run"},
            {"keywords": None},
            {"keywords": {"a": 1}},
            "not an object",
            ["k1", "k2"],
        ],
    )
    def test_non_list_keywords_skipped(self, content: Any) -> None:
        result = flatten_source({"A": {"S1": content, "S2": {"keywords": ["ok"]}}})

        assert [r.subject for r in result.records] == ["S2"]
        assert result.skipped_subjects == [("A", "S1")]

    def test_empty_keywords_list_is_eligible(self) -> None:
        """An empty list is still a list."""
        result = flatten_source({"A": {"S1": {"keywords": []}}})
        assert result.record_count == 1

    def test_non_list_style_modifiers_default_empty(self) -> None:
        result = flatten_source({"A": {"S1": {"keywords": ["k"], "style_modifiers": "bold"}}})
        assert result.records[0].style_modifiers == []

    def test_style_modifiers_copied(self) -> None:
        result = flatten_source(
            {"A": {"S1": {"keywords": ["k"], "style_modifiers": ["practical command"]}}}
        )
        assert result.records[0].style_modifiers == ["practical command"]

    def test_source_order_preserved(self) -> None:
        data = {
            "Z": {"s2": {"keywords": ["a"]}, "s1": {"keywords": ["b"]}},
            "A": {"s3": {"keywords": ["c"]}},
        }
        result = flatten_source(data)

        assert [(r.category, r.subject) for r in result.records] == [
            ("Z", "s2"),
            ("Z", "s1"),
            ("A", "s3"),
        ]

    def test_all_records_share_timestamp(self, sample_source: dict[str, Any]) -> None:
        result = flatten_source(sample_source, now=FIXED_NOW)

        for record in result.records:
            assert record.created_at == FIXED_NOW
            assert record.updated_at == FIXED_NOW

    def test_non_mapping_category_skipped(self) -> None:
        result = flatten_source({"A": ["not", "a", "mapping"], "B": {"S": {"keywords": ["k"]}}})

        assert result.record_count == 1
        assert result.category_count == 2

    def test_records_per_category(self, sample_source: dict[str, Any]) -> None:
        result = flatten_source(sample_source)
        assert result.records_per_category() == {"Containers": 2, "Programming": 1}

    def test_distinct_sets(self, sample_source: dict[str, Any]) -> None:
        result = flatten_source(sample_source)

        assert result.distinct_categories == {"Containers", "Programming"}
        assert result.distinct_subjects == {"Docker Commands", "Kubernetes", "Python"}


class TestParseSource:
    """Tests for parse_source."""

    def test_valid_object(self) -> None:
        assert parse_source('{"A": {}}') == {"A": {}}

    def test_malformed_json_raises(self) -> None:
        with pytest.raises(SourceLoadError, match="Invalid JSON"):
            parse_source("{not json")

    def test_top_level_array_raises(self) -> None:
        with pytest.raises(SourceLoadError, match="JSON object"):
            parse_source("[1, 2, 3]")


class TestLoadSource:
    """Tests for load_source."""

    def test_loads_file(self, source_file: Path, sample_source: dict[str, Any]) -> None:
        assert load_source(source_file) == sample_source

    def test_missing_file_raises_with_path(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.json"

        with pytest.raises(SourceLoadError) as exc_info:
            load_source(missing)

        assert exc_info.value.source_path == missing

    def test_malformed_file_raises(self, write_source: Callable[[Any], Path]) -> None:
        path = write_source("this is not json")

        with pytest.raises(SourceLoadError) as exc_info:
            load_source(path)

        assert exc_info.value.source_path == path

    def test_invalid_utf8_raises_with_path(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"A": {"S\xff": {"keywords": ["k"]}}}')

        with pytest.raises(SourceLoadError, match="Could not read file") as exc_info:
            load_source(path)

        assert exc_info.value.source_path == path

    def test_bundled_sample_data_is_valid(self, sample_data_path: Path) -> None:
        result = flatten_source(load_source(sample_data_path))
        assert result.record_count > 0
        assert result.skipped_count == 0
