"""Unit tests for the current-version document tree model."""

from __future__ import annotations

from typing import Any

import pytest

from fishbone.domain import (
    Category,
    Document,
    DocumentDefaults,
    Effect,
    ImportRootCause,
    NestedRootCause,
    SimpleRootCause,
    parse_attributes,
    parse_root_cause,
)
from fishbone.errors import DecodeError, ModelValidationError


def test_document_parses_every_root_cause_variant(v03_payload: dict[str, Any]) -> None:
    document = Document.from_dict(v03_payload)

    assert document.title == "current analysis"
    assert document.version == "0.3"
    assert document.kind == "fba"
    hardware = document.effects[0].categories[0]
    assert isinstance(hardware.root_causes[0], SimpleRootCause)
    assert isinstance(hardware.root_causes[1], ImportRootCause)
    assert hardware.root_causes[1].suggestion == "sub.fba"
    assert document.effects[0].categories[1].root_causes == []
    assert document.extra == {"reviewers": ["ana", "bo"]}


def test_document_round_trip_preserves_order_and_unknown_keys(
    v03_payload: dict[str, Any],
) -> None:
    rendered = Document.from_dict(v03_payload).to_dict()

    assert rendered == v03_payload
    assert list(rendered) == ["type", "version", "title", "fishbone", "attributes", "reviewers"]


def test_document_rejects_non_current_version(v03_payload: dict[str, Any]) -> None:
    v03_payload["version"] = "0.2"

    with pytest.raises(ModelValidationError) as excinfo:
        Document.from_dict(v03_payload)

    assert excinfo.value.path == "Document.version"
    assert isinstance(excinfo.value, DecodeError)


def test_missing_fishbone_and_attributes_default_to_empty() -> None:
    document = Document.from_dict({"version": "0.3"})

    assert document.effects == []
    assert document.attributes == []
    assert document.title is None


def test_validation_error_reports_the_offending_path() -> None:
    payload = {
        "version": "0.3",
        "fishbone": [{"name": "e", "categories": [{"name": "c", "rootCauses": "oops"}]}],
    }

    with pytest.raises(ModelValidationError) as excinfo:
        Document.from_dict(payload)

    assert excinfo.value.path == "Document.fishbone[0].categories[0].rootCauses"


def test_numeric_names_are_kept_as_text() -> None:
    effect = Effect.from_dict({"name": 42, "categories": [{"name": 1.5}]})

    assert effect.name == "42"
    assert effect.categories[0].name == "1.5"


def test_nested_root_cause_keeps_extra_keys_after_known_ones() -> None:
    raw = {
        "type": "nested",
        "relPath": "../a.fba",
        "title": "a",
        "data": [],
        "props": {"label": "x"},
    }

    parsed = parse_root_cause(raw)

    assert isinstance(parsed, NestedRootCause)
    assert parsed.extra == {"props": {"label": "x"}}
    assert parsed.to_dict() == raw


def test_simple_root_cause_to_dict_is_a_copy() -> None:
    raw = {"name": "x", "props": {"value": "ok"}}
    parsed = parse_root_cause(raw)

    dumped = parsed.to_dict()
    assert isinstance(dumped, dict)
    dumped["props"]["value"] = "changed"

    assert raw["props"]["value"] == "ok"
    assert isinstance(parsed, SimpleRootCause)
    assert parsed.props == {"value": "ok"}


def test_string_root_cause_serializes_back_to_text() -> None:
    parsed = parse_root_cause("legacy cause")

    assert isinstance(parsed, SimpleRootCause)
    assert parsed.to_dict() == "legacy cause"


def test_import_suggestion_falls_back_to_request_key() -> None:
    assert ImportRootCause({"type": "import", "request": " other.fba "}).suggestion == "other.fba"
    assert ImportRootCause().suggestion is None


def test_attributes_must_be_single_key_mappings() -> None:
    assert parse_attributes([{"a": 1}, {"b": None}]) == [{"a": 1}, {"b": None}]
    with pytest.raises(ModelValidationError):
        parse_attributes([{"a": 1, "b": 2}])
    with pytest.raises(ModelValidationError):
        parse_attributes(["a"])


def test_defaults_skeleton_and_display_title() -> None:
    defaults = DocumentDefaults(title="untitled", missing_title="<add a title>")

    skeleton = defaults.skeleton()

    assert skeleton.title == "untitled"
    assert skeleton.effects == [
        Effect(name="<enter effect to analyse>", categories=[Category(name="category 1")])
    ]
    assert defaults.display_title(Document(title=None)) == "<add a title>"
    assert defaults.display_title(Document(title="")) == "<add a title>"
    assert defaults.display_title(Document(title="kept")) == "kept"
