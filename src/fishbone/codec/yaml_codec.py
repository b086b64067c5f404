"""YAML text codec for ``.fba`` documents.

PyYAML's safe loader/dumper round-trips a plain mapping/list tree. Key order
is kept on dump so an update pass only rewrites what it changed.
"""

from __future__ import annotations

from typing import Any

import yaml

from fishbone.errors import DecodeError, EncodeError


def is_blank(text: str) -> bool:
    return not text.strip()


def decode_text(text: str) -> object:
    """Decode YAML text into plain Python data."""

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DecodeError(f"content is not valid YAML: {exc}") from exc
    if _has_cycle(parsed, set(), set()):
        raise DecodeError("content contains an alias that refers to itself")
    return parsed


def decode_mapping(text: str) -> dict[str, Any]:
    """Decode YAML text whose root must be a mapping."""

    parsed = decode_text(text)
    if not isinstance(parsed, dict):
        raise DecodeError(f"content is not an object but {type(parsed).__name__}")
    return parsed


def _has_cycle(node: object, ancestors: set[int], cleared: set[int]) -> bool:
    # Aliases may share a node between branches; only a node inside itself is a cycle.
    if not isinstance(node, (dict, list)):
        return False
    marker = id(node)
    if marker in ancestors:
        return True
    if marker in cleared:
        return False
    ancestors.add(marker)
    children = node.values() if isinstance(node, dict) else node
    try:
        if any(_has_cycle(child, ancestors, cleared) for child in children):
            return True
    finally:
        ancestors.discard(marker)
    cleared.add(marker)
    return False


def encode_mapping(payload: dict[str, Any]) -> str:
    """Encode a document mapping as YAML text."""

    try:
        return yaml.safe_dump(
            payload,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as exc:
        raise EncodeError(f"storing as YAML failed: {exc}") from exc


__all__ = ["decode_mapping", "decode_text", "encode_mapping", "is_blank"]
