"""Schema migration chain for persisted fishbone documents."""

from fishbone.migration.migrator import (
    MIGRATION_STEPS,
    AppliedStep,
    MigrationResult,
    MigrationStep,
    StepHook,
    migrate,
    normalize_version,
)

__all__ = [
    "MIGRATION_STEPS",
    "AppliedStep",
    "MigrationResult",
    "MigrationStep",
    "StepHook",
    "migrate",
    "normalize_version",
]
