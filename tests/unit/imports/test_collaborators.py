"""Unit tests for the stock file chooser, reader and notifier implementations."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from fishbone.imports import (
    CollectingNotifier,
    FileChooser,
    FilesystemTextReader,
    LoggingNotifier,
    Notifier,
    PresetFileChooser,
    PromptFileChooser,
    TextReader,
)


@pytest.mark.asyncio
async def test_preset_chooser_answers_in_order_then_cancels() -> None:
    chooser = PresetFileChooser(["a.fba", None, Path("b.fba")])

    answers = [await chooser.choose(suggestion=f"s{i}") for i in range(4)]

    assert answers == [Path("a.fba"), None, Path("b.fba"), None]
    assert chooser.requests == ["s0", "s1", "s2", "s3"]
    assert chooser.remaining == 0


@pytest.mark.asyncio
async def test_prompt_chooser_resolves_relative_answers(tmp_path: Path) -> None:
    prompts: list[str] = []
    out = io.StringIO()

    def answer(prompt: str) -> str:
        prompts.append(prompt)
        return "  parts/sub.fba \n"

    chooser = PromptFileChooser(base_dir=tmp_path, input_fn=answer, output=out)

    chosen = await chooser.choose(suggestion="hint.fba")

    assert chosen == tmp_path / "parts" / "sub.fba"
    assert prompts == ["import [hint.fba]: "]
    assert out.getvalue() == "select fishbone to import (*.fba)\n"


@pytest.mark.asyncio
async def test_prompt_chooser_empty_answer_uses_suggestion_or_cancels() -> None:
    chooser = PromptFileChooser(input_fn=lambda _prompt: "", output=io.StringIO())

    assert await chooser.choose(suggestion="/abs/hint.fba") == Path("/abs/hint.fba")
    assert await chooser.choose() is None


@pytest.mark.asyncio
async def test_prompt_chooser_treats_end_of_input_as_cancel() -> None:
    def closed_stdin(_prompt: str) -> str:
        raise EOFError

    chooser = PromptFileChooser(input_fn=closed_stdin, output=io.StringIO())

    assert await chooser.choose(suggestion="hint.fba") is None


@pytest.mark.asyncio
async def test_filesystem_reader_reads_utf8(tmp_path: Path) -> None:
    path = tmp_path / "doc.fba"
    path.write_text("title: Geräusch\n", encoding="utf-8")

    assert await FilesystemTextReader().read_text(path) == "title: Geräusch\n"


@pytest.mark.asyncio
async def test_filesystem_reader_propagates_os_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await FilesystemTextReader().read_text(tmp_path / "absent.fba")


def test_notifiers_record_diagnostics(caplog: pytest.LogCaptureFixture) -> None:
    collecting = CollectingNotifier()
    collecting.info("hello")
    collecting.error("boom")

    assert collecting.messages == [("info", "hello"), ("error", "boom")]
    assert collecting.errors == ["boom"]

    logger = logging.getLogger("tests.notify")
    with caplog.at_level(logging.INFO, logger="tests.notify"):
        LoggingNotifier(logger).error("logged boom")
    assert [record.getMessage() for record in caplog.records] == ["logged boom"]


def test_stock_implementations_satisfy_the_protocols() -> None:
    assert isinstance(PresetFileChooser(), FileChooser)
    assert isinstance(PromptFileChooser(), FileChooser)
    assert isinstance(FilesystemTextReader(), TextReader)
    assert isinstance(CollectingNotifier(), Notifier)
    assert isinstance(LoggingNotifier(), Notifier)
