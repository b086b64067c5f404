"""Dataclass tree model for fishbone documents with strict parsing and ordered serialization."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from fishbone.constants import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_CATEGORY_NAME,
    DEFAULT_EFFECT_NAME,
    DEFAULT_TITLE,
    DOCUMENT_TYPE,
    MISSING_TITLE,
    ROOT_CAUSE_IMPORT,
    ROOT_CAUSE_NESTED,
)
from fishbone.domain.validation import (
    as_name,
    as_optional_str,
    as_sequence,
    expect_mapping,
    extra_fields,
    fail,
    root_cause_type,
)

Attribute: TypeAlias = dict[str, Any]

_EFFECT_KEYS = frozenset({"name", "categories"})
_CATEGORY_KEYS = frozenset({"name", "rootCauses"})
_NESTED_KEYS = frozenset({"type", "relPath", "title", "data"})
_DOCUMENT_KEYS = frozenset({"type", "version", "title", "fishbone", "attributes"})


@dataclass(slots=True)
class SimpleRootCause:
    """Free-form root cause. ``fields`` is the complete persisted mapping."""

    fields: dict[str, Any] = field(default_factory=dict)
    text: str | None = None

    @property
    def props(self) -> dict[str, Any] | None:
        raw = self.fields.get("props")
        return raw if isinstance(raw, dict) else None

    def to_dict(self) -> dict[str, Any] | str:
        if self.text is not None:
            return self.text
        return copy.deepcopy(self.fields)


@dataclass(slots=True)
class NestedRootCause:
    """Embedded sub-diagram addressed by a path relative to the host document."""

    rel_path: str | None
    title: str | None
    data: list[Effect] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": ROOT_CAUSE_NESTED}
        if self.rel_path is not None:
            out["relPath"] = self.rel_path
        if self.title is not None:
            out["title"] = self.title
        out["data"] = [effect.to_dict() for effect in self.data]
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass(slots=True)
class ImportRootCause:
    """Pending import of another document; replaced during an update pass."""

    request: dict[str, Any] = field(default_factory=lambda: {"type": ROOT_CAUSE_IMPORT})

    @property
    def suggestion(self) -> str | None:
        for key in ("path", "request"):
            candidate = self.request.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return None

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self.request)


RootCause: TypeAlias = SimpleRootCause | NestedRootCause | ImportRootCause


@dataclass(slots=True)
class Category:
    name: str
    root_causes: list[RootCause] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object, path: str = "Category") -> Category:
        parsed = expect_mapping(data, path)
        return cls(
            name=as_name(parsed.get("name"), f"{path}.name"),
            root_causes=[
                parse_root_cause(item, f"{path}.rootCauses[{index}]")
                for index, item in enumerate(
                    as_sequence(parsed.get("rootCauses"), f"{path}.rootCauses")
                )
            ],
            extra=extra_fields(parsed, _CATEGORY_KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "rootCauses": [root_cause.to_dict() for root_cause in self.root_causes],
        }
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass(slots=True)
class Effect:
    name: str
    categories: list[Category] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object, path: str = "Effect") -> Effect:
        parsed = expect_mapping(data, path)
        return cls(
            name=as_name(parsed.get("name"), f"{path}.name"),
            categories=[
                Category.from_dict(item, f"{path}.categories[{index}]")
                for index, item in enumerate(
                    as_sequence(parsed.get("categories"), f"{path}.categories")
                )
            ],
            extra=extra_fields(parsed, _EFFECT_KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "categories": [category.to_dict() for category in self.categories],
        }
        out.update(copy.deepcopy(self.extra))
        return out


def parse_root_cause(value: object, path: str = "RootCause") -> RootCause:
    """Parse one persisted root cause into its tagged variant."""

    if isinstance(value, str):
        return SimpleRootCause(text=value)

    parsed = expect_mapping(value, path)
    kind = root_cause_type(parsed)
    if kind == ROOT_CAUSE_NESTED:
        return NestedRootCause(
            rel_path=as_optional_str(parsed.get("relPath"), f"{path}.relPath"),
            title=as_optional_str(parsed.get("title"), f"{path}.title"),
            data=parse_effects(parsed.get("data"), f"{path}.data"),
            extra=extra_fields(parsed, _NESTED_KEYS),
        )
    if kind == ROOT_CAUSE_IMPORT:
        return ImportRootCause(request=copy.deepcopy(parsed))
    return SimpleRootCause(fields=copy.deepcopy(parsed))


def parse_effects(value: object, path: str = "fishbone") -> list[Effect]:
    return [
        Effect.from_dict(item, f"{path}[{index}]")
        for index, item in enumerate(as_sequence(value, path))
    ]


def parse_attributes(value: object, path: str = "attributes") -> list[Attribute]:
    attributes: list[Attribute] = []
    for index, item in enumerate(as_sequence(value, path)):
        parsed = expect_mapping(item, f"{path}[{index}]")
        if len(parsed) != 1:
            fail(f"{path}[{index}]", f"attribute must have exactly one key, got {len(parsed)}")
        attributes.append(copy.deepcopy(parsed))
    return attributes


@dataclass(slots=True)
class Document:
    """A current-version fishbone document.

    ``extra`` holds every unrecognized top-level key, in persisted order, so an
    update pass can write them back untouched.
    """

    title: str | None
    effects: list[Effect] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    version: str = CURRENT_SCHEMA_VERSION
    kind: str = DOCUMENT_TYPE
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object) -> Document:
        parsed = expect_mapping(data, "Document")
        version = parsed.get("version")
        if version != CURRENT_SCHEMA_VERSION:
            fail("Document.version", f"expected {CURRENT_SCHEMA_VERSION!r}, got {version!r}")
        kind = parsed.get("type", DOCUMENT_TYPE)
        return cls(
            title=as_optional_str(parsed.get("title"), "Document.title"),
            effects=parse_effects(parsed.get("fishbone"), "Document.fishbone"),
            attributes=parse_attributes(parsed.get("attributes"), "Document.attributes"),
            version=CURRENT_SCHEMA_VERSION,
            kind=kind if isinstance(kind, str) else DOCUMENT_TYPE,
            extra=extra_fields(parsed, _DOCUMENT_KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.kind,
            "version": self.version,
            "title": self.title,
            "fishbone": [effect.to_dict() for effect in self.effects],
            "attributes": copy.deepcopy(self.attributes),
        }
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass(frozen=True, slots=True)
class DocumentDefaults:
    """Labels used for synthesized skeletons and untitled documents."""

    title: str = DEFAULT_TITLE
    missing_title: str = MISSING_TITLE
    effect_name: str = DEFAULT_EFFECT_NAME
    category_name: str = DEFAULT_CATEGORY_NAME

    def skeleton(self) -> Document:
        """One effect with one empty category, used for empty payloads."""

        return Document(
            title=self.title,
            effects=[Effect(name=self.effect_name, categories=[Category(name=self.category_name)])],
            attributes=[],
        )

    def display_title(self, document: Document) -> str:
        return document.title or self.missing_title


__all__ = [
    "Attribute",
    "Category",
    "Document",
    "DocumentDefaults",
    "Effect",
    "ImportRootCause",
    "NestedRootCause",
    "RootCause",
    "SimpleRootCause",
    "parse_attributes",
    "parse_effects",
    "parse_root_cause",
]
