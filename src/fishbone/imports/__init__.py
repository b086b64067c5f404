"""Import resolution and the collaborators it depends on."""

from fishbone.imports.collaborators import (
    CollectingNotifier,
    FileChooser,
    FilesystemTextReader,
    LoggingNotifier,
    Notifier,
    PresetFileChooser,
    PromptFileChooser,
    TextReader,
)
from fishbone.imports.resolver import (
    ImportRecord,
    ImportReport,
    ImportResolver,
    ImportStatus,
    relative_import_path,
)

__all__ = [
    "CollectingNotifier",
    "FileChooser",
    "FilesystemTextReader",
    "ImportRecord",
    "ImportReport",
    "ImportResolver",
    "ImportStatus",
    "LoggingNotifier",
    "Notifier",
    "PresetFileChooser",
    "PromptFileChooser",
    "TextReader",
    "relative_import_path",
]
