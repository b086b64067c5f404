"""
Entry points used by an editor host: render data out, persisted text back in.

``load_render_data`` decodes and migrates persisted text for display.
``update_document_text`` folds an edited tree back into the persisted text,
resolving pending imports on the way, and returns the new text. Keys of the
persisted mapping that an update does not own are carried over unchanged.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from fishbone.codec.document import decode_document
from fishbone.codec.yaml_codec import decode_text, encode_mapping, is_blank
from fishbone.constants import CURRENT_SCHEMA_VERSION
from fishbone.domain.models import (
    Attribute,
    Document,
    DocumentDefaults,
    Effect,
    parse_attributes,
)
from fishbone.errors import DecodeError, FishboneError
from fishbone.imports.collaborators import Notifier
from fishbone.imports.resolver import ImportReport, ImportResolver
from fishbone.migration import StepHook

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class RenderData:
    title: str
    attributes: list[Attribute] = field(default_factory=list)
    fishbone: list[Effect] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "attributes": copy.deepcopy(self.attributes),
            "fishbone": [effect.to_dict() for effect in self.fishbone],
        }


@dataclass(slots=True)
class DocumentUpdate:
    """Edited document parts. ``None`` leaves the persisted value alone."""

    fishbone: Sequence[Effect | Mapping[str, Any]] | None = None
    title: str | None = None
    attributes: Sequence[Mapping[str, Any]] | None = None
    version: str | None = None


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    text: str
    report: ImportReport | None = None


def load_render_data(
    text: str,
    *,
    on_step: StepHook | None = None,
    notifier: Notifier | None = None,
    defaults: DocumentDefaults | None = None,
) -> RenderData:
    """Decode ``text`` into what a renderer needs.

    Decode and version errors are passed to ``notifier`` and then re-raised.
    """

    labels = defaults or DocumentDefaults()
    try:
        document = decode_document(text, on_step=on_step, defaults=labels).document
    except FishboneError as exc:
        logger.error("render_data_failed", error_type=type(exc).__name__, error=str(exc))
        if notifier is not None:
            notifier.error(f"Could not load document: {exc}")
        raise
    return RenderData(
        title=labels.display_title(document),
        attributes=document.attributes,
        fishbone=document.effects,
    )


def _current_mapping(text: str) -> dict[str, Any]:
    if is_blank(text):
        return {}
    try:
        raw = decode_text(text)
    except DecodeError as exc:
        logger.warning("update_current_text_invalid", error=str(exc))
        return {}
    if not isinstance(raw, dict):
        logger.warning("update_current_text_not_mapping", found=type(raw).__name__)
        return {}
    return raw


def _as_effects(items: Sequence[Effect | Mapping[str, Any]]) -> list[Effect]:
    return [
        copy.deepcopy(item) if isinstance(item, Effect) else Effect.from_dict(item, f"fishbone[{i}]")
        for i, item in enumerate(items)
    ]


async def update_document(
    current_text: str,
    update: DocumentUpdate,
    *,
    resolver: ImportResolver | None = None,
    document_path: Path | None = None,
) -> UpdateOutcome:
    """Apply ``update`` to ``current_text``; see ``update_document_text``."""

    payload = _current_mapping(current_text)

    if update.version is not None:
        payload["version"] = update.version
    elif "version" not in payload:
        payload["version"] = CURRENT_SCHEMA_VERSION
    if update.title is not None:
        payload["title"] = update.title
    if update.attributes is not None:
        payload["attributes"] = parse_attributes(update.attributes, "update.attributes")

    report: ImportReport | None = None
    if update.fishbone is not None:
        host = Document(
            title=payload.get("title"),
            effects=_as_effects(update.fishbone),
            attributes=parse_attributes(payload.get("attributes"), "attributes"),
        )
        if resolver is not None:
            report = await resolver.resolve_imports(host, document_path=document_path)
            if report.records:
                logger.info(
                    "update_imports_resolved",
                    resolved=len(report.resolved),
                    cancelled=len(report.cancelled),
                    failed=len(report.failed),
                )
            if host.attributes or "attributes" in payload:
                payload["attributes"] = host.attributes
        payload["fishbone"] = [effect.to_dict() for effect in host.effects]

    return UpdateOutcome(text=encode_mapping(payload), report=report)


async def update_document_text(
    current_text: str,
    update: DocumentUpdate,
    *,
    resolver: ImportResolver | None = None,
    document_path: Path | None = None,
) -> str:
    """Return the persisted text for ``current_text`` with ``update`` applied.

    Without a resolver, import root causes are written back unresolved.
    Raises ``EncodeError`` when the result cannot be serialized; nothing is
    written in that case since the caller only receives text on success.
    """

    outcome = await update_document(
        current_text, update, resolver=resolver, document_path=document_path
    )
    return outcome.text


__all__ = [
    "DocumentUpdate",
    "RenderData",
    "UpdateOutcome",
    "load_render_data",
    "update_document",
    "update_document_text",
]
