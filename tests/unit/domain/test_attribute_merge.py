"""Unit tests for first-writer-wins attribute merging."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fishbone.domain import attribute_key, merge_attributes
from fishbone.errors import ModelValidationError


def test_existing_names_win_over_incoming_params() -> None:
    host: list[dict[str, Any]] = [{"foo": 2}]

    added = merge_attributes(host, [{"foo": 1}])

    assert added == []
    assert host == [{"foo": 2}]


def test_new_names_are_appended_in_incoming_order() -> None:
    host: list[dict[str, Any]] = [{"a": 1}]

    added = merge_attributes(host, [{"c": 3}, {"a": 9}, {"b": 2}])

    assert added == ["c", "b"]
    assert host == [{"a": 1}, {"c": 3}, {"b": 2}]


def test_none_incoming_is_a_no_op() -> None:
    host: list[dict[str, Any]] = [{"a": 1}]

    assert merge_attributes(host, None) == []
    assert host == [{"a": 1}]


def test_duplicate_incoming_names_are_added_once() -> None:
    host: list[dict[str, Any]] = []

    merge_attributes(host, [{"x": 1}, {"x": 2}])

    assert host == [{"x": 1}]


def test_appended_attributes_are_independent_copies() -> None:
    incoming = [{"x": {"fbUid": "1"}}]
    host: list[dict[str, Any]] = []

    merge_attributes(host, incoming)
    host[0]["x"]["fbUid"] = "changed"

    assert incoming[0]["x"]["fbUid"] == "1"


def test_attribute_key_rejects_malformed_attributes() -> None:
    assert attribute_key({"name": None}) == "name"
    with pytest.raises(ModelValidationError):
        attribute_key({})
    with pytest.raises(ModelValidationError):
        attribute_key({1: "x"})  # type: ignore[dict-item]


_names = st.text(alphabet="abcdef", min_size=1, max_size=3)
_attribute_lists = st.lists(
    st.builds(lambda name, value: {name: value}, _names, st.integers()), max_size=8
)


@settings(max_examples=100, deadline=None)
@given(primary=_attribute_lists, incoming=_attribute_lists)
def test_merge_keeps_primary_prefix_and_unions_names(
    primary: list[dict[str, int]], incoming: list[dict[str, int]]
) -> None:
    host = [dict(item) for item in primary]

    merge_attributes(host, incoming)

    assert host[: len(primary)] == primary
    names = [attribute_key(item) for item in host]
    expected = {attribute_key(item) for item in primary} | {
        attribute_key(item) for item in incoming
    }
    assert set(names) == expected
    appended = names[len(primary) :]
    assert len(appended) == len(set(appended))
