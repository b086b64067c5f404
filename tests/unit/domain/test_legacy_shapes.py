"""Unit tests for the typed 0.1/0.2 legacy views."""

from __future__ import annotations

from typing import Any

import pytest

from fishbone.domain.legacy import (
    LegacyDocumentV01,
    LegacyDocumentV02,
    NestedRootCauseV01,
)
from fishbone.errors import ModelValidationError


def test_v01_pairs_parse_into_named_records(v01_payload: dict[str, Any]) -> None:
    legacy = LegacyDocumentV01.from_dict(v01_payload)

    assert legacy.effects is not None
    effect = legacy.effects[0]
    assert effect.name == "brakes squeal"
    assert [category.name for category in effect.categories] == ["mechanics", "environment"]
    nested = effect.categories[0].root_causes[1]
    assert isinstance(nested, NestedRootCauseV01)
    assert "data" not in nested.fields
    assert nested.data[0].name == "caliper sticks"
    assert "fishbone" not in legacy.header
    assert legacy.header["owner"] == "qa-team"


def test_v01_rejects_pairs_of_the_wrong_length() -> None:
    with pytest.raises(ModelValidationError) as excinfo:
        LegacyDocumentV01.from_dict({"version": "0.1", "fishbone": [["only name"]]})

    assert "pair" in excinfo.value.detail


def test_empty_fishbone_stays_in_the_header() -> None:
    legacy = LegacyDocumentV02.from_dict({"version": "0.2", "fishbone": []})

    assert legacy.effects is None
    assert legacy.to_dict() == {"version": "0.2", "fishbone": []}


def test_v02_round_trips_unknown_effect_and_category_keys() -> None:
    payload = {
        "version": "0.2",
        "fishbone": [
            {
                "name": "e",
                "categories": [{"name": "c", "rootCauses": [], "color": "red"}],
                "weight": 3,
            }
        ],
    }

    assert LegacyDocumentV02.from_dict(payload).to_dict() == payload
