"""Collaborator interfaces consumed by the import resolver, with stock implementations."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

from fishbone.constants import DEFAULT_FILE_EXTENSION


@runtime_checkable
class FileChooser(Protocol):
    """Picks zero or one source document for an import."""

    async def choose(self, *, suggestion: str | None = None) -> Path | None: ...


@runtime_checkable
class TextReader(Protocol):
    """Reads a text file; raises ``OSError`` on failure."""

    async def read_text(self, path: Path) -> str: ...


@runtime_checkable
class Notifier(Protocol):
    """User-facing sink for non-fatal diagnostics."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class PresetFileChooser:
    """Answers choices from a fixed queue; ``None`` entries and an empty queue cancel."""

    def __init__(self, paths: Iterable[Path | str | None] = ()) -> None:
        self._pending: deque[Path | None] = deque(
            Path(item) if item is not None else None for item in paths
        )
        self.requests: list[str | None] = []

    @property
    def remaining(self) -> int:
        return len(self._pending)

    async def choose(self, *, suggestion: str | None = None) -> Path | None:
        self.requests.append(suggestion)
        if not self._pending:
            return None
        return self._pending.popleft()


class PromptFileChooser:
    """Asks for a path on a terminal. An empty answer or end of input cancels the import."""

    def __init__(
        self,
        *,
        title: str = "select fishbone to import",
        open_label: str = "import",
        extension: str = DEFAULT_FILE_EXTENSION,
        base_dir: Path | None = None,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._title = title
        self._open_label = open_label
        self._extension = extension.lstrip(".")
        self._base_dir = base_dir
        self._input_fn = input_fn
        self._output = output

    async def choose(self, *, suggestion: str | None = None) -> Path | None:
        out = self._output if self._output is not None else sys.stdout
        out.write(f"{self._title} (*.{self._extension})\n")
        hint = f" [{suggestion}]" if suggestion else ""
        try:
            answer = await asyncio.to_thread(self._input_fn, f"{self._open_label}{hint}: ")
        except EOFError:
            return None
        raw = answer.strip() or (suggestion or "")
        if not raw:
            return None
        candidate = Path(raw).expanduser()
        if not candidate.is_absolute() and self._base_dir is not None:
            candidate = self._base_dir / candidate
        return candidate


class FilesystemTextReader:
    """Reads UTF-8 text off the event loop thread."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def read_text(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding=self._encoding)


class LoggingNotifier:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger("fishbone.notify")

    def info(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)


@dataclass(slots=True)
class CollectingNotifier:
    """Keeps every diagnostic in memory, in arrival order."""

    messages: list[tuple[str, str]] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.messages if level == "error"]


__all__ = [
    "CollectingNotifier",
    "FileChooser",
    "FilesystemTextReader",
    "LoggingNotifier",
    "Notifier",
    "PresetFileChooser",
    "PromptFileChooser",
    "TextReader",
]
