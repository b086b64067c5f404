"""Output rendering for the fishbone CLI.

Plain, deterministic text. ``NO_COLOR`` and ``--no-color`` are respected for
the indentation markers used when drawing a diagram tree.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

from fishbone.domain.models import Effect, ImportRootCause, NestedRootCause, RootCause

if TYPE_CHECKING:
    from collections.abc import Sequence


def _color_allowed(no_color_flag: bool, stream: TextIO) -> bool:
    if no_color_flag:
        return False
    if os.environ.get("NO_COLOR", ""):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


class CLIRenderer:
    """Thin CLI output renderer."""

    def __init__(
        self,
        *,
        no_color: bool = False,
        verbose: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.verbose = verbose
        self._stream = stream if stream is not None else sys.stdout
        self._color = _color_allowed(no_color, self._stream)

    def _print(self, line: str = "") -> None:
        print(line, file=self._stream)

    def heading(self, text: str) -> None:
        self._print(text)

    def kv(self, key: str, value: object) -> None:
        self._print(f"{key}: {value}")

    def text(self, line: str) -> None:
        self._print(line)

    def section(self, title: str) -> None:
        """Print a section header with a preceding blank line."""

        self._print(f"\n{title}")

    def warning(self, text: str) -> None:
        self._print(f"  Warning: {text}")

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        for entry in entries:
            self._print(f"  {prefix}{entry}")

    def tree(self, effects: Sequence[Effect], *, indent: int = 0) -> None:
        """Print effects, categories and root causes as an indented outline."""

        pad = "  " * indent
        for effect in effects:
            self._print(f"{pad}effect: {effect.name}")
            for category in effect.categories:
                self._print(f"{pad}  category: {category.name}")
                for root_cause in category.root_causes:
                    self._print(f"{pad}    - {self._label(root_cause)}")
                    if isinstance(root_cause, NestedRootCause):
                        self.tree(root_cause.data, indent=indent + 3)

    def _label(self, root_cause: RootCause) -> str:
        if isinstance(root_cause, NestedRootCause):
            label = f"[nested] {root_cause.title or ''}".rstrip()
            if root_cause.rel_path:
                label += f" ({root_cause.rel_path})"
            return self._mark(label)
        if isinstance(root_cause, ImportRootCause):
            hint = root_cause.suggestion
            return self._mark(f"[import] {hint}" if hint else "[import]")
        if root_cause.text is not None:
            return root_cause.text
        name = root_cause.fields.get("name")
        if name is None and root_cause.props is not None:
            name = root_cause.props.get("label")
        return str(name) if name is not None else "<root cause>"

    def _mark(self, label: str) -> str:
        if not self._color:
            return label
        return f"\x1b[1m{label}\x1b[0m"


def create_renderer(*, no_color: bool = False, verbose: bool = False) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(no_color=no_color, verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer"]
