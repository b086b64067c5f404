"""Shared coercion helpers for parsing persisted fishbone payloads."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, NoReturn

from fishbone.errors import ModelValidationError


def fail(path: str, message: str) -> NoReturn:
    raise ModelValidationError(path, message)


def expect_mapping(value: object, path: str) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        fail(path, f"expected object, got {type(value).__name__}")
    parsed: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            fail(path, f"object keys must be strings, got {type(key).__name__}")
        parsed[key] = item
    return parsed


def as_sequence(value: object, path: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    fail(path, f"expected array, got {type(value).__name__}")


def as_name(value: object, path: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # YAML turns unquoted numeric labels into numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    fail(path, f"expected string, got {type(value).__name__}")


def as_optional_str(value: object, path: str) -> str | None:
    if value is None:
        return None
    return as_name(value, path)


def extra_fields(payload: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    """Deep copies of every key outside ``known``, in payload order."""

    return {key: copy.deepcopy(item) for key, item in payload.items() if key not in known}


def root_cause_type(value: object) -> str | None:
    """Return the ``type`` discriminant of a persisted root cause, if any."""

    if isinstance(value, Mapping):
        raw = value.get("type")
        if isinstance(raw, str):
            return raw
    return None


__all__ = [
    "as_name",
    "as_optional_str",
    "as_sequence",
    "expect_mapping",
    "extra_fields",
    "fail",
    "root_cause_type",
]
