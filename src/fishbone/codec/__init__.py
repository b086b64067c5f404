"""Structured-text codec for persisted fishbone documents."""

from fishbone.codec.document import decode_document, encode_document
from fishbone.codec.yaml_codec import decode_mapping, decode_text, encode_mapping, is_blank

__all__ = [
    "decode_document",
    "decode_mapping",
    "decode_text",
    "encode_document",
    "encode_mapping",
    "is_blank",
]
