"""Error taxonomy for decoding, migrating, importing and encoding fishbone documents."""

from __future__ import annotations

from pathlib import Path


class FishboneError(Exception):
    """Base class for all document-level failures."""


class DecodeError(FishboneError):
    """Raised when persisted text is not a structured mapping."""


class ModelValidationError(DecodeError):
    """Raised when a decoded mapping does not fit the tree model."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.detail = message
        super().__init__(f"{path}: {message}")


class UnsupportedVersionError(FishboneError):
    """Raised when a document version is not reachable by the migration chain."""

    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(
            f"The document uses unknown version {version!r}. "
            "Please check whether an update of fishbone is available."
        )


class ImportReadError(FishboneError):
    """Raised when the source document of an import cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read import source {path}: {reason}")


class ImportDecodeError(FishboneError):
    """Raised when the source document of an import fails decoding or migration."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot load import source {path}: {reason}")


class EncodeError(FishboneError):
    """Raised when a document tree cannot be serialized."""


__all__ = [
    "DecodeError",
    "EncodeError",
    "FishboneError",
    "ImportDecodeError",
    "ImportReadError",
    "ModelValidationError",
    "UnsupportedVersionError",
]
