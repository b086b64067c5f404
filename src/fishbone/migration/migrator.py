"""
Stepwise schema migration for persisted fishbone documents.

Each step is a pure, total function from one explicit legacy shape to the
next. Steps run in a fixed order keyed by source version; after every applied
step the caller may persist the intermediate payload, since each intermediate
version is itself a valid document worth recording.

Decisions are logged through ``structlog`` so migrations stay auditable.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from fishbone.constants import (
    CURRENT_SCHEMA_VERSION,
    SCHEMA_VERSIONS,
    TEXT_VALUE_FIELDS,
    TEXT_VALUE_KEY,
)
from fishbone.domain.legacy import (
    CategoryV02,
    EffectPairV01,
    EffectV02,
    LegacyDocumentV01,
    LegacyDocumentV02,
    NestedRootCauseV01,
    NestedRootCauseV02,
    RootCauseV01,
    RootCauseV02,
    effects_v02_to_list,
)
from fishbone.domain.models import Document
from fishbone.errors import DecodeError, UnsupportedVersionError

StepHook = Callable[[dict[str, Any]], object]


@dataclass(frozen=True, slots=True)
class AppliedStep:
    """One migration step that changed the stored version."""

    source: str
    target: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    document: Document
    steps: tuple[AppliedStep, ...] = ()

    @property
    def migrated(self) -> bool:
        return bool(self.steps)


@dataclass(frozen=True, slots=True)
class MigrationStep:
    source: str
    target: str
    apply: Callable[[Mapping[str, Any]], dict[str, Any]]


# ---------------------------------------------------------------------------
# 0.1 -> 0.2: [name, value] pairs become named-field effects and categories
# ---------------------------------------------------------------------------


def _upgrade_root_cause_v01(root_cause: RootCauseV01) -> RootCauseV02:
    if isinstance(root_cause, NestedRootCauseV01):
        return NestedRootCauseV02(
            fields=copy.deepcopy(root_cause.fields),
            data=upgrade_effects_v01(root_cause.data),
        )
    return copy.deepcopy(root_cause)


def upgrade_effects_v01(effects: list[EffectPairV01]) -> list[EffectV02]:
    return [
        EffectV02(
            name=effect.name,
            categories=[
                CategoryV02(
                    name=category.name,
                    root_causes=[_upgrade_root_cause_v01(rc) for rc in category.root_causes],
                )
                for category in effect.categories
            ],
        )
        for effect in effects
    ]


def upgrade_v01_to_v02(document: LegacyDocumentV01) -> LegacyDocumentV02:
    return LegacyDocumentV02(
        effects=upgrade_effects_v01(document.effects) if document.effects is not None else None,
        header=copy.deepcopy(document.header),
    )


# ---------------------------------------------------------------------------
# 0.2 -> 0.3: bare-text props become {textValue: ...} records
# ---------------------------------------------------------------------------


def _wrap_text_fields(fields: dict[str, Any]) -> None:
    props = fields.get("props")
    if not isinstance(props, dict):
        return
    for name in TEXT_VALUE_FIELDS:
        value = props.get(name)
        if isinstance(value, str):
            props[name] = {TEXT_VALUE_KEY: value}


def wrap_text_fields_v02(effects: list[EffectV02]) -> None:
    """Wrap text props in place, depth-first through nested diagrams."""

    for effect in effects:
        for category in effect.categories:
            for root_cause in category.root_causes:
                if isinstance(root_cause, NestedRootCauseV02):
                    wrap_text_fields_v02(root_cause.data)
                    _wrap_text_fields(root_cause.fields)
                elif isinstance(root_cause, dict):
                    _wrap_text_fields(root_cause)


def upgrade_v02_to_v03(document: LegacyDocumentV02) -> dict[str, Any]:
    payload = copy.deepcopy(document.header)
    if document.effects is not None:
        effects = copy.deepcopy(document.effects)
        wrap_text_fields_v02(effects)
        payload["fishbone"] = effects_v02_to_list(effects)
    payload["version"] = "0.3"
    return payload


def _step_v01(payload: Mapping[str, Any]) -> dict[str, Any]:
    return upgrade_v01_to_v02(LegacyDocumentV01.from_dict(payload)).to_dict()


def _step_v02(payload: Mapping[str, Any]) -> dict[str, Any]:
    return upgrade_v02_to_v03(LegacyDocumentV02.from_dict(payload))


MIGRATION_STEPS: tuple[MigrationStep, ...] = (
    MigrationStep(source="0.1", target="0.2", apply=_step_v01),
    MigrationStep(source="0.2", target="0.3", apply=_step_v02),
)


def normalize_version(value: object) -> object:
    """Map a YAML-decoded version onto its string form.

    Unquoted ``version: 0.3`` decodes to a float; every known version is a
    short decimal, so ``str`` restores it exactly.
    """

    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float):
        return str(value)
    return value


def migrate(
    raw: object,
    *,
    on_step: StepHook | None = None,
    logger: Any | None = None,
) -> MigrationResult:
    """Upgrade a decoded payload to the current schema version.

    ``raw`` is never mutated. ``on_step`` receives a copy of the payload after
    every applied step. Raises ``DecodeError`` when ``raw`` is not a mapping and
    ``UnsupportedVersionError`` when the chain cannot reach the current version.
    """

    log = logger if logger is not None else structlog.get_logger(__name__)
    if not isinstance(raw, Mapping):
        raise DecodeError(f"content is not an object but {type(raw).__name__}")

    payload: dict[str, Any] = copy.deepcopy(dict(raw))
    version = normalize_version(payload.get("version"))
    if version in SCHEMA_VERSIONS:
        payload["version"] = version

    applied: list[AppliedStep] = []
    for step in MIGRATION_STEPS:
        if payload.get("version") != step.source:
            continue
        payload = step.apply(payload)
        applied.append(AppliedStep(source=step.source, target=step.target))
        log.info(
            "migration_step_applied",
            source_version=step.source,
            target_version=step.target,
            title=payload.get("title"),
        )
        if on_step is not None:
            on_step(copy.deepcopy(payload))

    if payload.get("version") != CURRENT_SCHEMA_VERSION:
        log.warning("migration_unsupported_version", version=payload.get("version"))
        raise UnsupportedVersionError(payload.get("version"))

    return MigrationResult(document=Document.from_dict(payload), steps=tuple(applied))


__all__ = [
    "MIGRATION_STEPS",
    "AppliedStep",
    "MigrationResult",
    "MigrationStep",
    "StepHook",
    "migrate",
    "normalize_version",
    "upgrade_effects_v01",
    "upgrade_v01_to_v02",
    "upgrade_v02_to_v03",
    "wrap_text_fields_v02",
]
