"""Typed views of the persisted shapes written by schema versions 0.1 and 0.2.

Version 0.1 stored effects as ``[name, [[categoryName, rootCauses], ...]]``
pairs. Version 0.2 switched to named-field effects and categories but still
kept ``instructions``, ``backgroundDescription`` and ``comments`` root-cause
props as bare strings. Each shape gets its own types so every migration step
is a total function between two explicit representations.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from fishbone.constants import ROOT_CAUSE_NESTED
from fishbone.domain.validation import (
    as_name,
    as_sequence,
    expect_mapping,
    extra_fields,
    fail,
    root_cause_type,
)

_DATA_KEY = frozenset({"data"})
_FISHBONE_KEY = frozenset({"fishbone"})


def _as_pair(value: object, path: str) -> tuple[object, object]:
    items = as_sequence(value, path)
    if len(items) != 2:
        fail(path, f"expected [name, value] pair, got {len(items)} item(s)")
    return items[0], items[1]


# ---------------------------------------------------------------------------
# 0.1
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class NestedRootCauseV01:
    fields: dict[str, Any]
    data: list[EffectPairV01]


RootCauseV01: TypeAlias = NestedRootCauseV01 | object


@dataclass(slots=True)
class CategoryPairV01:
    name: str
    root_causes: list[RootCauseV01] = field(default_factory=list)


@dataclass(slots=True)
class EffectPairV01:
    name: str
    categories: list[CategoryPairV01] = field(default_factory=list)


def _parse_root_cause_v01(value: object, path: str) -> RootCauseV01:
    if root_cause_type(value) == ROOT_CAUSE_NESTED:
        parsed = expect_mapping(value, path)
        return NestedRootCauseV01(
            fields=extra_fields(parsed, _DATA_KEY),
            data=parse_effect_pairs_v01(parsed.get("data"), f"{path}.data"),
        )
    return copy.deepcopy(value)


def parse_effect_pairs_v01(value: object, path: str) -> list[EffectPairV01]:
    effects: list[EffectPairV01] = []
    for index, raw_effect in enumerate(as_sequence(value, path)):
        effect_path = f"{path}[{index}]"
        name, raw_categories = _as_pair(raw_effect, effect_path)
        categories: list[CategoryPairV01] = []
        for cat_index, raw_category in enumerate(as_sequence(raw_categories, f"{effect_path}[1]")):
            cat_path = f"{effect_path}[1][{cat_index}]"
            cat_name, raw_root_causes = _as_pair(raw_category, cat_path)
            categories.append(
                CategoryPairV01(
                    name=as_name(cat_name, f"{cat_path}[0]"),
                    root_causes=[
                        _parse_root_cause_v01(item, f"{cat_path}[1][{rc_index}]")
                        for rc_index, item in enumerate(
                            as_sequence(raw_root_causes, f"{cat_path}[1]")
                        )
                    ],
                )
            )
        effects.append(EffectPairV01(name=as_name(name, f"{effect_path}[0]"), categories=categories))
    return effects


@dataclass(slots=True)
class LegacyDocumentV01:
    effects: list[EffectPairV01] | None
    header: dict[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LegacyDocumentV01:
        parsed = expect_mapping(data, "Document(0.1)")
        raw_effects = parsed.get("fishbone")
        return cls(
            effects=(
                parse_effect_pairs_v01(raw_effects, "Document(0.1).fishbone")
                if raw_effects
                else None
            ),
            header=extra_fields(parsed, _FISHBONE_KEY if raw_effects else frozenset()),
        )


# ---------------------------------------------------------------------------
# 0.2
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class NestedRootCauseV02:
    fields: dict[str, Any]
    data: list[EffectV02]


RootCauseV02: TypeAlias = NestedRootCauseV02 | object


@dataclass(slots=True)
class CategoryV02:
    name: str
    root_causes: list[RootCauseV02] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class EffectV02:
    name: str
    categories: list[CategoryV02] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


def _parse_root_cause_v02(value: object, path: str) -> RootCauseV02:
    if root_cause_type(value) == ROOT_CAUSE_NESTED:
        parsed = expect_mapping(value, path)
        return NestedRootCauseV02(
            fields=extra_fields(parsed, _DATA_KEY),
            data=parse_effects_v02(parsed.get("data"), f"{path}.data"),
        )
    return copy.deepcopy(value)


def parse_effects_v02(value: object, path: str) -> list[EffectV02]:
    effects: list[EffectV02] = []
    for index, raw_effect in enumerate(as_sequence(value, path)):
        effect_path = f"{path}[{index}]"
        effect = expect_mapping(raw_effect, effect_path)
        categories: list[CategoryV02] = []
        for cat_index, raw_category in enumerate(
            as_sequence(effect.get("categories"), f"{effect_path}.categories")
        ):
            cat_path = f"{effect_path}.categories[{cat_index}]"
            category = expect_mapping(raw_category, cat_path)
            categories.append(
                CategoryV02(
                    name=as_name(category.get("name"), f"{cat_path}.name"),
                    root_causes=[
                        _parse_root_cause_v02(item, f"{cat_path}.rootCauses[{rc_index}]")
                        for rc_index, item in enumerate(
                            as_sequence(category.get("rootCauses"), f"{cat_path}.rootCauses")
                        )
                    ],
                    extra=extra_fields(category, frozenset({"name", "rootCauses"})),
                )
            )
        effects.append(
            EffectV02(
                name=as_name(effect.get("name"), f"{effect_path}.name"),
                categories=categories,
                extra=extra_fields(effect, frozenset({"name", "categories"})),
            )
        )
    return effects


def _root_cause_v02_to_dict(root_cause: RootCauseV02) -> object:
    if isinstance(root_cause, NestedRootCauseV02):
        out = copy.deepcopy(root_cause.fields)
        out["data"] = effects_v02_to_list(root_cause.data)
        return out
    return copy.deepcopy(root_cause)


def effects_v02_to_list(effects: list[EffectV02]) -> list[dict[str, Any]]:
    rendered: list[dict[str, Any]] = []
    for effect in effects:
        out: dict[str, Any] = {
            "name": effect.name,
            "categories": [
                {
                    "name": category.name,
                    "rootCauses": [_root_cause_v02_to_dict(rc) for rc in category.root_causes],
                    **copy.deepcopy(category.extra),
                }
                for category in effect.categories
            ],
        }
        out.update(copy.deepcopy(effect.extra))
        rendered.append(out)
    return rendered


@dataclass(slots=True)
class LegacyDocumentV02:
    effects: list[EffectV02] | None
    header: dict[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LegacyDocumentV02:
        parsed = expect_mapping(data, "Document(0.2)")
        raw_effects = parsed.get("fishbone")
        return cls(
            effects=(
                parse_effects_v02(raw_effects, "Document(0.2).fishbone") if raw_effects else None
            ),
            header=extra_fields(parsed, _FISHBONE_KEY if raw_effects else frozenset()),
        )

    def to_dict(self) -> dict[str, Any]:
        out = copy.deepcopy(self.header)
        out["version"] = "0.2"
        if self.effects is not None:
            out["fishbone"] = effects_v02_to_list(self.effects)
        return out


__all__ = [
    "CategoryPairV01",
    "CategoryV02",
    "EffectPairV01",
    "EffectV02",
    "LegacyDocumentV01",
    "LegacyDocumentV02",
    "NestedRootCauseV01",
    "NestedRootCauseV02",
    "RootCauseV01",
    "RootCauseV02",
    "effects_v02_to_list",
    "parse_effect_pairs_v01",
    "parse_effects_v02",
]
