"""
Domain types for fishbone documents: effects, categories, root causes and attributes.

The domain layer is free of IO; decoding text and reading files live in
``fishbone.codec`` and ``fishbone.imports``.
"""

from fishbone.domain.attributes import attribute_key, merge_attributes
from fishbone.domain.models import (
    Attribute,
    Category,
    Document,
    DocumentDefaults,
    Effect,
    ImportRootCause,
    NestedRootCause,
    RootCause,
    SimpleRootCause,
    parse_attributes,
    parse_effects,
    parse_root_cause,
)

__all__ = [
    "Attribute",
    "Category",
    "Document",
    "DocumentDefaults",
    "Effect",
    "ImportRootCause",
    "NestedRootCause",
    "RootCause",
    "SimpleRootCause",
    "attribute_key",
    "merge_attributes",
    "parse_attributes",
    "parse_effects",
    "parse_root_cause",
]
