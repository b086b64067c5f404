"""Command-line interface router for fishbone."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fishbone.codec import decode_document, encode_mapping
from fishbone.config import (
    ConfigLoadError,
    ConfigValidationError,
    document_defaults,
    load_config,
)
from fishbone.constants import CURRENT_SCHEMA_VERSION
from fishbone.errors import FishboneError
from fishbone.imports import (
    CollectingNotifier,
    FileChooser,
    FilesystemTextReader,
    ImportResolver,
    PresetFileChooser,
    PromptFileChooser,
)
from fishbone.main import ExitCode
from fishbone.observability import correlation_scope, setup_logging, shutdown_logging
from fishbone.service import DocumentUpdate, load_render_data, update_document
from fishbone.ui.render import CLIRenderer, create_renderer
from fishbone.utils import atomic_write


class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    def __init__(self, message: str, exit_code: int = int(ExitCode.DOCUMENT_ERROR)) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="fishbone",
        description=(
            "fishbone: versioned root-cause analysis documents (.fba).\n\n"
            "Common workflows:\n"
            "  fishbone show doc.fba               Print title, attributes and tree\n"
            "  fishbone migrate doc.fba            Upgrade to the current schema\n"
            "  fishbone update doc.fba --import a.fba\n"
            "                                      Resolve import root causes\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to fishbone TOML config (default: ./fishbone.toml if present).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # show ----------------------------------------------------------------
    show_parser = subparsers.add_parser(
        "show",
        parents=[common],
        help="Decode a document and print it (nothing is written)",
    )
    show_parser.add_argument("file", help="Path to the .fba document")
    show_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    show_parser.set_defaults(handler=_cmd_show)

    # migrate -------------------------------------------------------------
    migrate_parser = subparsers.add_parser(
        "migrate",
        parents=[common],
        help="Upgrade a document to the current schema version in place",
        description=(
            "Run the migration chain and write every intermediate version.\n\n"
            "Examples:\n"
            "  fishbone migrate doc.fba\n"
            "  fishbone migrate doc.fba --dry-run\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    migrate_parser.add_argument("file", help="Path to the .fba document")
    migrate_parser.add_argument(
        "--dry-run", action="store_true", help="Report the steps without writing"
    )
    migrate_parser.set_defaults(handler=_cmd_migrate)

    # update --------------------------------------------------------------
    update_parser = subparsers.add_parser(
        "update",
        parents=[common],
        help="Resolve import root causes and write the document back",
        description=(
            "Each import root cause is answered, in document order, by the next\n"
            "--import path; imports left without a path are dropped.\n\n"
            "Examples:\n"
            "  fishbone update doc.fba --import sub.fba\n"
            "  fishbone update doc.fba --interactive\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    update_parser.add_argument("file", help="Path to the .fba document")
    update_parser.add_argument(
        "--import",
        dest="imports",
        action="append",
        default=[],
        metavar="PATH",
        help="Source document for the next import root cause (repeatable)",
    )
    update_parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for each import source instead of using --import paths",
    )
    update_parser.set_defaults(handler=_cmd_update)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show effective configuration",
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return int(ExitCode.CONFIG_ERROR)

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_show(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    path = _document_path(args)
    notifier = CollectingNotifier()

    with _logging_session(config, path):
        text = _read_document(path)
        try:
            data = load_render_data(text, notifier=notifier, defaults=document_defaults(config))
        except FishboneError as exc:
            raise CLIError(str(exc)) from exc

    if getattr(args, "json", False):
        _emit_json({"command": "show", "path": path.as_posix(), "document": data.to_dict()})
        return 0

    renderer = _get_renderer(args)
    renderer.kv("Title", data.title)
    if data.attributes:
        renderer.section("Attributes:")
        renderer.items([_describe_attribute(attribute) for attribute in data.attributes])
    renderer.section("Fishbone:")
    renderer.tree(data.fishbone)
    return 0


def _cmd_migrate(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    path = _document_path(args)
    dry_run = bool(getattr(args, "dry_run", False))
    renderer = _get_renderer(args)

    def persist(payload: dict[str, Any]) -> None:
        if not dry_run:
            atomic_write(path, encode_mapping(payload))

    with _logging_session(config, path):
        text = _read_document(path)
        try:
            result = decode_document(text, on_step=persist, defaults=document_defaults(config))
        except FishboneError as exc:
            raise CLIError(str(exc)) from exc

    if not result.migrated:
        renderer.text(f"{path}: already at version {CURRENT_SCHEMA_VERSION}")
        return 0
    for step in result.steps:
        renderer.text(f"{path}: {step.source} -> {step.target}")
    if dry_run:
        renderer.warning("dry run, nothing written")
    return 0


def _cmd_update(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    path = _document_path(args)
    renderer = _get_renderer(args)
    notifier = CollectingNotifier()

    chooser: FileChooser
    if getattr(args, "interactive", False):
        chooser = PromptFileChooser(
            title=config["imports"]["prompt_title"],
            open_label=config["imports"]["open_label"],
            extension=config["document"]["file_extension"],
            base_dir=path.parent,
        )
    else:
        chooser = PresetFileChooser(Path(item).expanduser() for item in args.imports)
    resolver = ImportResolver(
        chooser,
        FilesystemTextReader(),
        notifier,
        defaults=document_defaults(config),
    )

    with _logging_session(config, path):
        text = _read_document(path)
        try:
            document = decode_document(text, defaults=document_defaults(config)).document
            outcome = asyncio.run(
                update_document(
                    text,
                    DocumentUpdate(
                        fishbone=document.effects,
                        title=document.title,
                        attributes=document.attributes,
                        version=CURRENT_SCHEMA_VERSION,
                    ),
                    resolver=resolver,
                    document_path=path,
                )
            )
        except FishboneError as exc:
            raise CLIError(str(exc)) from exc
        atomic_write(path, outcome.text)

    report = outcome.report
    if report is not None:
        for record in report.resolved:
            renderer.text(f"imported {record.source} as {record.rel_path}")
        for record in report.cancelled:
            renderer.text(f"dropped import {record.suggestion or ''}".rstrip())
    for message in notifier.errors:
        renderer.warning(message)
    renderer.text(f"{path}: written")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)

    if getattr(args, "json", False):
        _emit_json({"command": "config", "config": config})
        return 0

    renderer = _get_renderer(args)
    renderer.text(json.dumps(config, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(
        no_color=bool(getattr(args, "no_color", False)),
        verbose=bool(getattr(args, "verbose", False)),
    )


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    config_path = getattr(args, "config_path", None)
    try:
        return load_config(config_path)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=int(ExitCode.CONFIG_ERROR)) from exc


def _document_path(args: argparse.Namespace) -> Path:
    raw = getattr(args, "file", None)
    if not isinstance(raw, str) or not raw.strip():
        raise CLIError("a document path is required", exit_code=int(ExitCode.CONFIG_ERROR))
    return Path(raw).expanduser().resolve()


def _read_document(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"cannot read {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise CLIError(f"cannot decode {path}: {exc.reason} at byte {exc.start}") from exc


@contextmanager
def _logging_session(config: Mapping[str, Any], path: Path) -> Iterator[None]:
    handle = setup_logging(config["observability"], run_id=uuid.uuid4().hex[:12])
    try:
        with correlation_scope(document_path=path.as_posix()):
            yield
    finally:
        shutdown_logging(handle)


def _describe_attribute(attribute: Mapping[str, Any]) -> str:
    (name, params), *_ = attribute.items()
    if params is None:
        return str(name)
    return f"{name}: {json.dumps(params, sort_keys=True, ensure_ascii=False, default=str)}"


__all__ = ["CLIError", "build_parser", "run_cli"]
