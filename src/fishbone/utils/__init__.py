"""Small shared helpers."""

from fishbone.utils.fs import atomic_write

__all__ = ["atomic_write"]
