"""
fishbone: unit tests for observability logging

Purpose
- Validate JSON-lines logging, correlation metadata and structlog routing.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
import structlog

from fishbone.observability import (
    LoggingConfig,
    correlation_scope,
    get_active_logging_handle,
    get_correlation_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _cleanup_logging() -> Iterator[None]:
    yield
    shutdown_logging()
    structlog.reset_defaults()


def _logger_name() -> str:
    return f"fishbone.tests.logging.{uuid4().hex}"


def _read_json_lines(path: Path) -> list[dict[str, object]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines]


def test_json_lines_carry_run_and_document_correlation(tmp_path: Path) -> None:
    logger_name = _logger_name()
    handle = setup_structured_logging(
        LoggingConfig(run_id="run-1", base_log_dir=tmp_path, logger_name=logger_name)
    )
    logger = logging.getLogger(logger_name)

    with correlation_scope(document_path="/docs/a.fba"):
        logger.info("resolved %s", "import", extra={"rel_path": "../sub.fba"})
    logger.warning("outside scope")
    shutdown_logging(handle)

    assert handle.log_path == tmp_path / "run-1" / "fishbone.jsonl"
    first, second = _read_json_lines(handle.log_path)
    assert first["message"] == "resolved import"
    assert first["run_id"] == "run-1"
    assert first["document_path"] == "/docs/a.fba"
    assert first["fields"] == {"rel_path": "../sub.fba"}
    assert second["level"] == "WARNING"
    assert "document_path" not in second


def test_structlog_events_reach_the_json_file(tmp_path: Path) -> None:
    handle = setup_logging(
        {"log_level": "DEBUG", "log_to_stdout": False},
        run_id="run-structlog",
        log_dir=tmp_path,
    )

    structlog.get_logger("fishbone.tests").info("import_resolved", rel_path="x.fba", added=["a"])
    shutdown_logging(handle)

    assert handle.log_path is not None
    (entry,) = _read_json_lines(handle.log_path)
    assert entry["message"] == "import_resolved"
    assert entry["logger"] == "fishbone.tests"
    assert entry["fields"] == {"rel_path": "x.fba", "added": ["a"]}


def test_level_filters_records(tmp_path: Path) -> None:
    handle = setup_logging({"log_level": "WARNING"}, run_id="run-level", log_dir=tmp_path)

    logger = logging.getLogger("fishbone")
    logger.info("dropped")
    logger.error("kept")
    shutdown_logging(handle)

    assert handle.log_path is not None
    assert [entry["message"] for entry in _read_json_lines(handle.log_path)] == ["kept"]


def test_without_sinks_no_file_is_written(tmp_path: Path) -> None:
    handle = setup_logging({}, run_id="run-quiet")

    logging.getLogger("fishbone").info("nowhere")
    shutdown_logging(handle)

    assert handle.log_path is None
    assert list(tmp_path.iterdir()) == []


def test_new_setup_replaces_the_active_handle(tmp_path: Path) -> None:
    first = setup_logging({}, run_id="one", log_dir=tmp_path)
    second = setup_logging({}, run_id="two", log_dir=tmp_path)

    assert first.is_shutdown
    assert get_active_logging_handle() is second

    shutdown_logging()
    assert second.is_shutdown
    assert get_active_logging_handle() is None


def test_correlation_scope_nests_and_restores() -> None:
    with correlation_scope(document_path="a.fba"):
        with correlation_scope(run_id="r1"):
            assert get_correlation_context() == {"document_path": "a.fba", "run_id": "r1"}
        with correlation_scope(document_path=None):
            assert get_correlation_context() == {}
        assert get_correlation_context() == {"document_path": "a.fba"}
    assert get_correlation_context() == {}

    with pytest.raises(ValueError):
        with correlation_scope(document_path="  "):
            pass


def test_invalid_config_values_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        setup_structured_logging(LoggingConfig(run_id=" "))
    with pytest.raises(ValueError):
        setup_structured_logging(LoggingConfig(run_id="r", level="CHATTY"))
    with pytest.raises(ValueError):
        setup_structured_logging(
            LoggingConfig(run_id="r", base_log_dir=tmp_path, log_filename="sub/x.jsonl")
        )
