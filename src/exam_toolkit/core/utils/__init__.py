"""Shared utilities."""

from .serialization import (
    SerializationError,
    decode_questions,
    decode_results,
    encode_questions,
    encode_results,
)

__all__ = [
    "SerializationError",
    "decode_questions",
    "decode_results",
    "encode_questions",
    "encode_results",
]
