"""Sequential async visitor over root causes, including nested sub-diagrams.

The visitor decides per root cause whether to keep, delete or replace it.
Deletion is handled with explicit index bookkeeping: the cursor stays put and
the remaining length shrinks, so no sibling is skipped or visited twice.
Whenever the root cause left in place is a nested diagram, the walk descends
into it before moving on to the next sibling. That covers nested diagrams
that existed before the pass as well as ones a visitor just produced.

Visits never overlap: each one is awaited to completion before the next
starts, so visitors may freely prompt the user or read files.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterator, MutableSequence, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from fishbone.domain.models import Effect, NestedRootCause, RootCause


class OutcomeKind(StrEnum):
    NO_CHANGE = "no_change"
    DELETE = "delete"
    REPLACE = "replace"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Visitor verdict for a single root cause."""

    kind: OutcomeKind
    replacement: RootCause | None = None

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.REPLACE and self.replacement is None:
            raise ValueError("replace outcome requires a replacement root cause")
        if self.kind is not OutcomeKind.REPLACE and self.replacement is not None:
            raise ValueError(f"{self.kind.value} outcome must not carry a replacement")


NO_CHANGE = Outcome(OutcomeKind.NO_CHANGE)
DELETE = Outcome(OutcomeKind.DELETE)


def replace(root_cause: RootCause) -> Outcome:
    return Outcome(OutcomeKind.REPLACE, root_cause)


Visitor: TypeAlias = Callable[[RootCause], Outcome | None | Awaitable[Outcome | None]]


@dataclass(slots=True)
class TraversalStats:
    visited: int = 0
    deleted: int = 0
    replaced: int = 0
    descended: int = 0
    max_depth: int = 0


async def for_each_root_cause(
    effects: MutableSequence[Effect],
    visit: Visitor,
) -> TraversalStats:
    """Visit every root cause in document order, applying the visitor's outcome.

    Order is effect, then category, then root-cause index, depth-first into
    nested diagrams. A visitor returning ``None`` means no change.
    """

    stats = TraversalStats()
    await _walk(effects, visit, stats, depth=0)
    return stats


async def _walk(
    effects: Sequence[Effect],
    visit: Visitor,
    stats: TraversalStats,
    *,
    depth: int,
) -> None:
    stats.max_depth = max(stats.max_depth, depth)
    for effect in effects:
        for category in effect.categories:
            root_causes = category.root_causes
            index = 0
            remaining = len(root_causes)
            while index < remaining:
                current = root_causes[index]
                outcome = await _invoke(visit, current)
                stats.visited += 1

                if outcome.kind is OutcomeKind.DELETE:
                    del root_causes[index]
                    remaining -= 1
                    stats.deleted += 1
                    continue

                if outcome.kind is OutcomeKind.REPLACE:
                    if outcome.replacement is None:
                        raise ValueError("replace outcome requires a replacement root cause")
                    current = outcome.replacement
                    root_causes[index] = current
                    stats.replaced += 1

                if isinstance(current, NestedRootCause):
                    stats.descended += 1
                    await _walk(current.data, visit, stats, depth=depth + 1)
                index += 1


async def _invoke(visit: Visitor, root_cause: RootCause) -> Outcome:
    result = visit(root_cause)
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return NO_CHANGE
    if not isinstance(result, Outcome):
        raise TypeError(f"visitor must return an Outcome, got {type(result).__name__}")
    return result


def iter_root_causes(
    effects: Sequence[Effect],
    *,
    depth: int = 0,
) -> Iterator[tuple[int, RootCause]]:
    """Read-only walk yielding ``(depth, root_cause)`` in traversal order."""

    for effect in effects:
        for category in effect.categories:
            for root_cause in category.root_causes:
                yield depth, root_cause
                if isinstance(root_cause, NestedRootCause):
                    yield from iter_root_causes(root_cause.data, depth=depth + 1)


__all__ = [
    "DELETE",
    "NO_CHANGE",
    "Outcome",
    "OutcomeKind",
    "TraversalStats",
    "Visitor",
    "for_each_root_cause",
    "iter_root_causes",
    "replace",
]
