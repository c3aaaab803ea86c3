"""Tests for parsing gh CLI JSON output."""

import json

import pytest

from restack.core.github.parsing import parse_pr_list, parse_pr_view
from restack.core.github.types import StackedPR


def test_parse_pr_view() -> None:
    output = json.dumps(
        {"number": 42, "headRefName": "feat-b", "baseRefName": "feat-a", "state": "OPEN"}
    )

    assert parse_pr_view(output) == StackedPR(42, "feat-b", "feat-a", "OPEN")


def test_parse_pr_view_merged_pr_is_not_open() -> None:
    output = json.dumps(
        {"number": 3, "headRefName": "old", "baseRefName": "main", "state": "MERGED"}
    )

    pr = parse_pr_view(output)

    assert not pr.is_open


def test_parse_pr_view_missing_field_raises_key_error() -> None:
    with pytest.raises(KeyError):
        parse_pr_view(json.dumps({"number": 1, "state": "OPEN"}))


def test_parse_pr_view_invalid_json_raises_value_error() -> None:
    with pytest.raises(ValueError):
        parse_pr_view("not json")


def test_parse_pr_list_keeps_rows_in_listing_order() -> None:
    output = json.dumps(
        [
            {"number": 1, "headRefName": "feat-a", "baseRefName": "main", "state": "OPEN"},
            {"number": 2, "headRefName": "user/feat-b", "baseRefName": "feat-a", "state": "OPEN"},
        ]
    )

    prs = parse_pr_list(output)

    assert [pr.head_ref for pr in prs] == ["feat-a", "user/feat-b"]
    assert prs[1].base_ref == "feat-a"


def test_parse_pr_list_keeps_rows_sharing_a_head() -> None:
    output = json.dumps(
        [
            {"number": 5, "headRefName": "main", "baseRefName": "main", "state": "OPEN"},
            {"number": 9, "headRefName": "main", "baseRefName": "release", "state": "OPEN"},
        ]
    )

    assert [pr.number for pr in parse_pr_list(output)] == [5, 9]


def test_parse_pr_list_empty() -> None:
    assert parse_pr_list("[]") == []
