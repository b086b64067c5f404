"""
Replaces ``import`` root causes with nested diagrams loaded from other documents.

Each import asks the file chooser for at most one source. A cancelled choice
drops the import silently. A chosen source is read, decoded and migrated in
memory; its attributes merge into the host (host wins on name clashes) and the
import becomes a nested root cause labelled with the source path relative to
the host document. Failures to read or decode a source are recovered: the
import is dropped, the notifier hears about it and the pass continues.

Imports inside a freshly loaded diagram are resolved in the same pass, since
the traversal descends into every replacement.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog

from fishbone.codec.document import decode_document
from fishbone.domain.attributes import merge_attributes
from fishbone.domain.models import (
    Document,
    DocumentDefaults,
    ImportRootCause,
    NestedRootCause,
    RootCause,
)
from fishbone.errors import FishboneError, ImportDecodeError, ImportReadError
from fishbone.imports.collaborators import FileChooser, Notifier, TextReader
from fishbone.tree.traversal import (
    DELETE,
    NO_CHANGE,
    Outcome,
    TraversalStats,
    for_each_root_cause,
    replace,
)


class ImportStatus(StrEnum):
    RESOLVED = "resolved"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ImportRecord:
    status: ImportStatus
    suggestion: str | None = None
    source: Path | None = None
    rel_path: str | None = None
    added_attributes: tuple[str, ...] = ()
    error: str | None = None


@dataclass(slots=True)
class ImportReport:
    """Outcome of every import met during one resolution pass, in visit order."""

    records: list[ImportRecord] = field(default_factory=list)
    stats: TraversalStats = field(default_factory=TraversalStats)

    def _with(self, status: ImportStatus) -> list[ImportRecord]:
        return [record for record in self.records if record.status is status]

    @property
    def resolved(self) -> list[ImportRecord]:
        return self._with(ImportStatus.RESOLVED)

    @property
    def cancelled(self) -> list[ImportRecord]:
        return self._with(ImportStatus.CANCELLED)

    @property
    def failed(self) -> list[ImportRecord]:
        return self._with(ImportStatus.FAILED)


def relative_import_path(source: Path, document_path: Path | None) -> str:
    """Label for ``source`` relative to the host document file.

    The start point is the document file itself, not its directory, so a
    sibling file is labelled ``../sibling.fba``. Without a host path the
    source path is used as given.
    """

    if document_path is None:
        return source.as_posix()
    try:
        rel = os.path.relpath(source, start=document_path)
    except ValueError:
        # different drives on Windows
        return source.as_posix()
    return Path(rel).as_posix()


class ImportResolver:
    def __init__(
        self,
        chooser: FileChooser,
        reader: TextReader,
        notifier: Notifier | None = None,
        *,
        defaults: DocumentDefaults | None = None,
        logger: Any | None = None,
    ) -> None:
        self._chooser = chooser
        self._reader = reader
        self._notifier = notifier
        self._defaults = defaults or DocumentDefaults()
        self._log = logger if logger is not None else structlog.get_logger(__name__)

    async def resolve_imports(
        self,
        document: Document,
        *,
        document_path: Path | None = None,
    ) -> ImportReport:
        """Resolve every import in ``document`` in place and report what happened."""

        report = ImportReport()

        async def visit(root_cause: RootCause) -> Outcome:
            if not isinstance(root_cause, ImportRootCause):
                return NO_CHANGE
            return await self._resolve_one(root_cause, document, document_path, report)

        report.stats = await for_each_root_cause(document.effects, visit)
        return report

    async def _resolve_one(
        self,
        request: ImportRootCause,
        host: Document,
        document_path: Path | None,
        report: ImportReport,
    ) -> Outcome:
        suggestion = request.suggestion
        source = await self._chooser.choose(suggestion=suggestion)
        if source is None:
            self._log.info("import_cancelled", suggestion=suggestion)
            report.records.append(ImportRecord(ImportStatus.CANCELLED, suggestion=suggestion))
            return DELETE

        try:
            external = await self._load(source)
        except (ImportReadError, ImportDecodeError) as exc:
            self._log.warning(
                "import_failed",
                source=str(source),
                error_type=type(exc).__name__,
                reason=exc.reason,
            )
            if self._notifier is not None:
                self._notifier.error(str(exc))
            report.records.append(
                ImportRecord(
                    ImportStatus.FAILED,
                    suggestion=suggestion,
                    source=source,
                    error=str(exc),
                )
            )
            return DELETE

        rel_path = relative_import_path(source, document_path)
        added = merge_attributes(host.attributes, external.attributes)
        self._log.info(
            "import_resolved",
            source=str(source),
            rel_path=rel_path,
            title=external.title,
            added_attributes=added,
        )
        report.records.append(
            ImportRecord(
                ImportStatus.RESOLVED,
                suggestion=suggestion,
                source=source,
                rel_path=rel_path,
                added_attributes=tuple(added),
            )
        )
        return replace(
            NestedRootCause(rel_path=rel_path, title=external.title, data=external.effects)
        )

    async def _load(self, source: Path) -> Document:
        try:
            text = await self._reader.read_text(source)
        except OSError as exc:
            raise ImportReadError(source, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise ImportReadError(source, f"{exc.reason} at byte {exc.start}") from exc
        try:
            return decode_document(text, defaults=self._defaults, logger=self._log).document
        except FishboneError as exc:
            raise ImportDecodeError(source, str(exc)) from exc


__all__ = [
    "ImportRecord",
    "ImportReport",
    "ImportResolver",
    "ImportStatus",
    "relative_import_path",
]
