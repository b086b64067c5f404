"""
fishbone: configuration schema and validation.

Purpose
- Define authoritative configuration defaults and strict validation rules.

What should be included in this file
- Schema versioning and migration guidance.
- Validation rules for required fields, types and enums.
- Deterministic deep-merge helpers.

Functional requirements
- Validate config payloads and return structured errors (field path + message).
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, NotRequired, TypedDict

from fishbone.constants import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_CATEGORY_NAME,
    DEFAULT_EFFECT_NAME,
    DEFAULT_FILE_EXTENSION,
    DEFAULT_TITLE,
    MISSING_TITLE,
)
from fishbone.domain.models import DocumentDefaults

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

# Config paths that should be normalized relative to config file location.
PATH_FIELDS: Final[tuple[tuple[str, ...], ...]] = (("observability", "log_dir"),)

# Settable through env/CLI although absent from the defaults.
OPTIONAL_FIELDS: Final[tuple[tuple[tuple[str, ...], Literal["str", "int", "bool"]], ...]] = (
    (("observability", "log_dir"), "str"),
)


class MetaConfig(TypedDict):
    schema_version: int


class DocumentConfig(TypedDict):
    default_title: str
    missing_title: str
    default_effect_name: str
    default_category_name: str
    file_extension: str


class ImportsConfig(TypedDict):
    prompt_title: str
    open_label: str


class ObservabilityConfig(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_to_stdout: bool
    log_dir: NotRequired[str]


class FishboneConfig(TypedDict):
    meta: MetaConfig
    document: DocumentConfig
    imports: ImportsConfig
    observability: ObservabilityConfig


DEFAULT_CONFIG: Final[FishboneConfig] = {
    "meta": {"schema_version": ConfigSchemaVersion},
    "document": {
        "default_title": DEFAULT_TITLE,
        "missing_title": MISSING_TITLE,
        "default_effect_name": DEFAULT_EFFECT_NAME,
        "default_category_name": DEFAULT_CATEGORY_NAME,
        "file_extension": DEFAULT_FILE_EXTENSION,
    },
    "imports": {
        "prompt_title": "select fishbone to import",
        "open_label": "import",
    },
    "observability": {
        "log_level": "INFO",
        "log_to_stdout": False,
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_config() -> FishboneConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def migration_guidance(found_version: int) -> str:
    if found_version < ConfigSchemaVersion:
        return (
            f"schema version {found_version} is older than supported {ConfigSchemaVersion}; "
            "upgrade fishbone.toml to the current schema"
        )
    if found_version > ConfigSchemaVersion:
        return (
            f"schema version {found_version} is newer than supported {ConfigSchemaVersion}; "
            "upgrade fishbone"
        )
    return "schema version is current"


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``."""

    merged = copy.deepcopy(dict(base))
    _merge_into(merged, overlay)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate config and return structured issues with deterministic paths."""

    issues = _IssueCollector()
    root = _as_object(config, "<root>", issues)
    if root is None:
        return ConfigValidationResult(config=None, issues=issues.items())

    _reject_unknown_keys(root, set(DEFAULT_CONFIG), "", issues)
    out: dict[str, Any] = {}
    for key, validator in _SECTIONS.items():
        raw = root.get(key)
        if raw is None:
            issues.add(key, "missing required section")
            continue
        section = _as_object(raw, key, issues)
        if section is not None:
            out[key] = validator(section, key, issues)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=out, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def document_defaults(config: Mapping[str, Any]) -> DocumentDefaults:
    """Build the document labels from a validated config."""

    section = config["document"]
    return DocumentDefaults(
        title=section["default_title"],
        missing_title=section["missing_title"],
        effect_name=section["default_effect_name"],
        category_name=section["default_category_name"],
    )


def _validate_meta(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"schema_version"}, path, issues)
    _require_keys(payload, {"schema_version"}, path, issues)

    out: dict[str, Any] = {}
    if "schema_version" in payload:
        parsed = _as_int(payload["schema_version"], _join(path, "schema_version"), issues)
        if parsed is not None:
            out["schema_version"] = parsed
            if parsed != ConfigSchemaVersion:
                issues.add(_join(path, "schema_version"), migration_guidance(parsed))
    return out


def _validate_strings(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    *,
    allowed: set[str],
) -> dict[str, Any]:
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)
    out: dict[str, Any] = {}
    for key in sorted(allowed):
        if key not in payload:
            continue
        parsed = _as_str(payload[key], _join(path, key), issues)
        if parsed is not None:
            out[key] = parsed
    return out


def _validate_document(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    out = _validate_strings(payload, path, issues, allowed=set(DEFAULT_CONFIG["document"]))
    extension = out.get("file_extension")
    if extension is not None:
        out["file_extension"] = extension.lstrip(".")
        if not out["file_extension"]:
            issues.add(_join(path, "file_extension"), "must not be empty")
    return out


def _validate_imports(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    return _validate_strings(payload, path, issues, allowed=set(DEFAULT_CONFIG["imports"]))


def _validate_observability(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"log_level", "log_to_stdout", "log_dir"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, {"log_level", "log_to_stdout"}, path, issues)

    out: dict[str, Any] = {}
    if "log_level" in payload:
        parsed_level = _as_str(payload["log_level"], _join(path, "log_level"), issues)
        if parsed_level is not None:
            parsed_level = parsed_level.upper()
            if parsed_level in LOG_LEVELS:
                out["log_level"] = parsed_level
            else:
                expected = ", ".join(LOG_LEVELS)
                issues.add(
                    _join(path, "log_level"),
                    f"invalid value {parsed_level!r}; expected one of: {expected}",
                )

    if "log_to_stdout" in payload:
        parsed_stdout = _as_bool(payload["log_to_stdout"], _join(path, "log_to_stdout"), issues)
        if parsed_stdout is not None:
            out["log_to_stdout"] = parsed_stdout

    if "log_dir" in payload:
        parsed_dir = _as_str(payload["log_dir"], _join(path, "log_dir"), issues)
        if parsed_dir is not None:
            if "\x00" in parsed_dir:
                issues.add(_join(path, "log_dir"), "must not contain NUL bytes")
            else:
                out["log_dir"] = parsed_dir
    return out


_SECTIONS: Final[
    dict[str, Callable[[Mapping[str, object], str, _IssueCollector], dict[str, Any]]]
] = {
    "meta": _validate_meta,
    "document": _validate_document,
    "imports": _validate_imports,
    "observability": _validate_observability,
}


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if not parsed:
        issues.add(path, "must not be empty")
        return None
    return parsed


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_int(value: object, path: str, issues: _IssueCollector) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    return value


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown field")


def _require_keys(
    payload: Mapping[str, object],
    required: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(required):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            if not isinstance(existing, dict):
                existing = {}
                target[key] = existing
            _merge_into(existing, value)
        else:
            target[key] = copy.deepcopy(value)


__all__ = [
    "DEFAULT_CONFIG",
    "LOG_LEVELS",
    "OPTIONAL_FIELDS",
    "PATH_FIELDS",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DocumentConfig",
    "FishboneConfig",
    "ImportsConfig",
    "ObservabilityConfig",
    "assert_valid_config",
    "default_config",
    "document_defaults",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
