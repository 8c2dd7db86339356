"""
Module 01 - Schemas & Codecs
File: canonical.py

Purpose: Deterministic JSON text for codec-serialized values. The canonical
text of a value is the input to its leaf hash.

Rules:
- Only JSON values: null, bool, int, finite float, str, list/tuple, dict with str keys
- Object keys sorted, no whitespace, UTF-8 kept unescaped
- null is a value like any other; object members holding null are kept
"""

import json
import math
from typing import Any

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Check a serialized value is plain JSON and normalize tuples to lists.

    Raises:
        CanonicalizationException: On NaN/Infinity, non-string object keys
            or any non-JSON type.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise CanonicalizationException(
                message=f"Non-finite float value encountered: {value}",
                details={"path": path, "value": str(value)},
            )
        return value

    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise CanonicalizationException(
                    message=f"Object keys must be strings, got {type(k).__name__}",
                    details={"path": path, "key": repr(k)},
                )
            result[k] = canonicalize_value(v, f"{path}.{k}" if path else k)
        return result

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize a JSON value to canonical text.

    Example:
        >>> dumps_canonical({"b": None, "a": 1})
        '{"a":1,"b":null}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    )
