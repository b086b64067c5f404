"""
fishbone: unit tests for config loading and validation

Purpose
- Validate layered config loading from defaults, TOML, env overrides and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Env var path mapping and type coercion, including optional fields.
- Structured validation issues and path normalization.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fishbone.config import (
    ConfigLoadError,
    ConfigValidationError,
    default_config,
    document_defaults,
    dump_effective_config,
    load_config,
    validate_config,
)


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "fishbone.toml"
    _write_config(
        config_path,
        """
[document]
default_title = "from file"
""".strip(),
    )

    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(config_path, environ={"FISHBONE_DOCUMENT_DEFAULT_TITLE": "from env"})
    cli_loaded = load_config(
        config_path,
        environ={"FISHBONE_DOCUMENT_DEFAULT_TITLE": "from env"},
        cli_overrides={"document.default_title": "from cli"},
    )

    assert file_loaded["document"]["default_title"] == "from file"
    assert file_loaded["document"]["missing_title"] == "<please add title to .fba>"
    assert env_loaded["document"]["default_title"] == "from env"
    assert cli_loaded["document"]["default_title"] == "from cli"


def test_missing_default_file_falls_back_to_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    loaded = load_config(environ={})

    assert loaded == default_config()


def test_explicit_missing_file_is_a_load_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="not found"):
        load_config(tmp_path / "absent.toml", environ={})


def test_invalid_toml_is_a_load_error(tmp_path: Path) -> None:
    config_path = tmp_path / "fishbone.toml"
    _write_config(config_path, "[document\n")

    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(config_path, environ={})


def test_env_values_are_coerced_by_default_type(tmp_path: Path) -> None:
    config_path = tmp_path / "fishbone.toml"
    _write_config(config_path, "")

    loaded = load_config(
        config_path,
        environ={
            "FISHBONE_OBSERVABILITY_LOG_TO_STDOUT": "yes",
            "FISHBONE_OBSERVABILITY_LOG_LEVEL": "debug",
        },
    )

    assert loaded["observability"]["log_to_stdout"] is True
    assert loaded["observability"]["log_level"] == "DEBUG"

    with pytest.raises(ConfigLoadError, match="must be a boolean"):
        load_config(config_path, environ={"FISHBONE_OBSERVABILITY_LOG_TO_STDOUT": "maybe"})
    with pytest.raises(ConfigLoadError, match="must be an integer"):
        load_config(config_path, environ={"FISHBONE_META_SCHEMA_VERSION": "one"})


def test_optional_log_dir_is_bound_and_normalized(tmp_path: Path) -> None:
    config_path = tmp_path / "conf" / "fishbone.toml"
    _write_config(config_path, "")

    loaded = load_config(config_path, environ={"FISHBONE_OBSERVABILITY_LOG_DIR": "logs"})

    expected = tmp_path.resolve() / "conf" / "logs"
    assert loaded["observability"]["log_dir"] == expected.as_posix()


def test_validation_reports_every_issue_with_its_path(tmp_path: Path) -> None:
    config_path = tmp_path / "fishbone.toml"
    _write_config(
        config_path,
        """
surprise = 1

[document]
file_extension = "."

[observability]
log_level = "LOUD"
log_to_stdout = "no"
""".strip(),
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(config_path, environ={})

    paths = {issue.path for issue in excinfo.value.issues}
    assert paths == {
        "surprise",
        "document.file_extension",
        "observability.log_level",
        "observability.log_to_stdout",
    }


def test_newer_schema_version_gets_upgrade_guidance() -> None:
    config = default_config()
    config["meta"]["schema_version"] = 2

    result = validate_config(config)

    assert not result.is_valid
    assert "upgrade fishbone" in result.issues[0].message


def test_missing_section_is_reported() -> None:
    config = dict(default_config())
    del config["imports"]

    result = validate_config(config)

    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("imports", "missing required section")
    ]


def test_extension_dot_is_stripped_and_defaults_are_built(tmp_path: Path) -> None:
    config_path = tmp_path / "fishbone.toml"
    _write_config(
        config_path,
        """
[document]
file_extension = ".fish"
missing_title = "untitled"
""".strip(),
    )

    loaded = load_config(config_path, environ={})
    defaults = document_defaults(loaded)

    assert loaded["document"]["file_extension"] == "fish"
    assert defaults.missing_title == "untitled"
    assert defaults.effect_name == "<enter effect to analyse>"


def test_effective_config_dump_is_deterministic() -> None:
    first = dump_effective_config(default_config())
    second = dump_effective_config(json.loads(first))

    assert first == second
    assert json.loads(first)["imports"]["open_label"] == "import"
