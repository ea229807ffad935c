"""Unit tests for metadata field validation."""

import pytest

from src.registry.validation import (
    validate_labels,
    validate_metadata,
    validate_size,
    validate_summary,
    validate_title,
)


class TestTitle:
    def test_valid_title(self) -> None:
        assert validate_title("Doc A") is None

    def test_title_at_limit(self) -> None:
        assert validate_title("t" * 64) is None

    @pytest.mark.parametrize("title", ["", "t" * 65])
    def test_title_length_violations(self, title: str) -> None:
        result = validate_title(title)
        assert result is not None
        assert result["code"] == "invalid_input"

    def test_non_string_title(self) -> None:
        result = validate_title(42)
        assert result is not None
        assert result["code"] == "invalid_input"


class TestSummary:
    def test_summary_at_limit(self) -> None:
        assert validate_summary("s" * 128) is None

    @pytest.mark.parametrize("summary", ["", "s" * 129])
    def test_summary_length_violations(self, summary: str) -> None:
        result = validate_summary(summary)
        assert result is not None
        assert result["code"] == "invalid_input"
        assert result["details"]["field"] == "summary"


class TestSize:
    @pytest.mark.parametrize("size", [1, 100, 999_999_999])
    def test_sizes_in_range(self, size: int) -> None:
        assert validate_size(size) is None

    @pytest.mark.parametrize("size", [0, -1, 1_000_000_000, 5_000_000_000])
    def test_sizes_out_of_range(self, size: int) -> None:
        result = validate_size(size)
        assert result is not None
        assert result["code"] == "size_limit_exceeded"

    @pytest.mark.parametrize("size", [True, 1.5, "100", None])
    def test_non_integer_sizes(self, size: object) -> None:
        result = validate_size(size)
        assert result is not None
        assert result["code"] == "size_limit_exceeded"


class TestLabels:
    def test_single_label(self) -> None:
        assert validate_labels(["x"]) is None

    def test_ten_labels_at_limit(self) -> None:
        assert validate_labels([f"l{i}" for i in range(10)]) is None

    def test_label_at_length_limit(self) -> None:
        assert validate_labels(["l" * 32]) is None

    @pytest.mark.parametrize(
        "labels",
        [
            [],
            [f"l{i}" for i in range(11)],
            ["ok", ""],
            ["l" * 33],
            ["ok", 7],
            "x",
            None,
        ],
    )
    def test_invalid_labels(self, labels: object) -> None:
        result = validate_labels(labels)
        assert result is not None
        assert result["code"] == "invalid_metadata"

    def test_reports_offending_index(self) -> None:
        result = validate_labels(["a", "b", ""])
        assert result is not None
        assert result["details"]["index"] == 2


class TestValidationOrder:
    """validate_metadata reports the first failing field in a fixed order."""

    def test_all_valid(self) -> None:
        assert validate_metadata("t", 1, "s", ["x"]) is None

    def test_title_checked_before_size(self) -> None:
        result = validate_metadata("", 0, "s", ["x"])
        assert result is not None
        assert result["code"] == "invalid_input"
        assert result["details"]["field"] == "title"

    def test_size_checked_before_summary(self) -> None:
        result = validate_metadata("t", 0, "", ["x"])
        assert result is not None
        assert result["code"] == "size_limit_exceeded"

    def test_summary_checked_before_labels(self) -> None:
        result = validate_metadata("t", 1, "", [])
        assert result is not None
        assert result["code"] == "invalid_input"
        assert result["details"]["field"] == "summary"

    def test_labels_checked_last(self) -> None:
        result = validate_metadata("t", 1, "s", [])
        assert result is not None
        assert result["code"] == "invalid_metadata"
