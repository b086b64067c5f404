"""First-writer-wins union of document attribute sets."""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any

from fishbone.errors import ModelValidationError


def attribute_key(attribute: Mapping[str, Any]) -> str:
    """Return the name of a single-key attribute mapping."""

    if not isinstance(attribute, Mapping) or len(attribute) != 1:
        raise ModelValidationError("attribute", "attribute must be a single-key mapping")
    (key,) = attribute.keys()
    if not isinstance(key, str):
        raise ModelValidationError("attribute", f"attribute name must be a string, got {key!r}")
    return key


def merge_attributes(
    primary: MutableSequence[dict[str, Any]],
    incoming: Sequence[Mapping[str, Any]] | None,
) -> list[str]:
    """Append attributes from ``incoming`` whose names ``primary`` lacks.

    Attributes already present in ``primary`` win, even when the incoming
    parameters differ. Returns the names that were added, in ``incoming`` order.
    """

    if incoming is None:
        return []

    known = {attribute_key(attribute) for attribute in primary}
    added: list[str] = []
    for attribute in incoming:
        key = attribute_key(attribute)
        if key in known:
            continue
        primary.append(copy.deepcopy(dict(attribute)))
        known.add(key)
        added.append(key)
    return added


__all__ = ["attribute_key", "merge_attributes"]
