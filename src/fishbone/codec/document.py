"""Text <-> current-version ``Document`` conversion."""

from __future__ import annotations

from typing import Any

from fishbone.codec.yaml_codec import decode_mapping, encode_mapping, is_blank
from fishbone.domain.models import Document, DocumentDefaults
from fishbone.migration import MigrationResult, StepHook, migrate


def decode_document(
    text: str,
    *,
    on_step: StepHook | None = None,
    defaults: DocumentDefaults | None = None,
    logger: Any | None = None,
) -> MigrationResult:
    """Decode persisted text and migrate it to the current schema.

    Blank text yields the default skeleton without running the chain.
    """

    if is_blank(text):
        return MigrationResult(document=(defaults or DocumentDefaults()).skeleton())
    return migrate(decode_mapping(text), on_step=on_step, logger=logger)


def encode_document(document: Document) -> str:
    return encode_mapping(document.to_dict())


__all__ = ["decode_document", "encode_document"]
