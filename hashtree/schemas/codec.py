"""
Module 01 - Schemas & Codecs
File: codec.py

Purpose: Value codecs binding a caller's value type to the JSON values
stored in leaf ``data`` fields.

A codec is a pair of plain functions:
- serialize: value -> JSON-compatible value
- deserialize: JSON value -> value (raises on malformed input)

The canonical JSON text of ``serialize(value)`` is what gets hashed for a
leaf, so serialize MUST be deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

V = TypeVar("V")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ValueCodec(Generic[V]):
    """
    Immutable serialize/deserialize pair for one value type.

    Attributes:
        serialize: Converts a value to a JSON-compatible value
        deserialize: Converts a JSON value back; raises ValueError/TypeError
            (or a pydantic ValidationError) when the input is malformed
        name: Label used in diagnostics
    """
    serialize: Callable[[V], Any]
    deserialize: Callable[[Any], V]
    name: str = "custom"


def _decode_int(data: Any) -> int:
    # bool is a subclass of int but true/false are not integers here
    if isinstance(data, bool) or not isinstance(data, int):
        raise TypeError(f"expected integer, got {type(data).__name__}")
    return data


def _decode_str(data: Any) -> str:
    if not isinstance(data, str):
        raise TypeError(f"expected string, got {type(data).__name__}")
    return data


def _decode_bytes(data: Any) -> bytes:
    return bytes.fromhex(_decode_str(data))


INT_CODEC: ValueCodec[int] = ValueCodec(serialize=int, deserialize=_decode_int, name="int")
STR_CODEC: ValueCodec[str] = ValueCodec(serialize=str, deserialize=_decode_str, name="str")
BYTES_CODEC: ValueCodec[bytes] = ValueCodec(
    serialize=bytes.hex, deserialize=_decode_bytes, name="bytes"
)
JSON_CODEC: ValueCodec[Any] = ValueCodec(
    serialize=lambda value: value, deserialize=lambda data: data, name="json"
)


def pydantic_codec(model_cls: type[M]) -> ValueCodec[M]:
    """
    Build a codec for a Pydantic model type.

    Values are dumped in JSON mode and restored with ``model_validate``,
    so a malformed leaf surfaces as a pydantic ValidationError.

    Example:
        >>> codec = pydantic_codec(Receipt)
        >>> tree = MerkleTree.initialize(codec).insert(receipt)
    """
    return ValueCodec(
        serialize=lambda value: value.model_dump(mode="json"),
        deserialize=model_cls.model_validate,
        name=model_cls.__name__,
    )
