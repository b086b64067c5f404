"""Stable constants shared across the fishbone document layers."""

from __future__ import annotations

from typing import Final

DOCUMENT_TYPE: Final[str] = "fba"

# Schema versions, oldest first. The last entry is the version written.
SCHEMA_VERSIONS: Final[tuple[str, ...]] = ("0.1", "0.2", "0.3")
CURRENT_SCHEMA_VERSION: Final[str] = SCHEMA_VERSIONS[-1]

# Root-cause discriminants (persisted under ``type``).
ROOT_CAUSE_NESTED: Final[str] = "nested"
ROOT_CAUSE_IMPORT: Final[str] = "import"

# Root-cause props that moved from bare text to ``{textValue: ...}`` in 0.3.
TEXT_VALUE_FIELDS: Final[tuple[str, ...]] = (
    "instructions",
    "backgroundDescription",
    "comments",
)
TEXT_VALUE_KEY: Final[str] = "textValue"

DEFAULT_TITLE: Final[str] = "<no title>"
MISSING_TITLE: Final[str] = "<please add title to .fba>"
DEFAULT_EFFECT_NAME: Final[str] = "<enter effect to analyse>"
DEFAULT_CATEGORY_NAME: Final[str] = "category 1"
DEFAULT_FILE_EXTENSION: Final[str] = "fba"

CONFIG_SCHEMA_VERSION: Final[int] = 1

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "CURRENT_SCHEMA_VERSION",
    "DEFAULT_CATEGORY_NAME",
    "DEFAULT_EFFECT_NAME",
    "DEFAULT_FILE_EXTENSION",
    "DEFAULT_TITLE",
    "DOCUMENT_TYPE",
    "MISSING_TITLE",
    "ROOT_CAUSE_IMPORT",
    "ROOT_CAUSE_NESTED",
    "SCHEMA_VERSIONS",
    "TEXT_VALUE_FIELDS",
    "TEXT_VALUE_KEY",
]
