"""
Module 03 - Merkle Tree Serialization
Node tree <-> JSON document.

Document shape:
    EmptyLeaf -> null
    Leaf      -> {"hash": ..., "data": codec.serialize(value)}
    Branch    -> {"count": ..., "hash": ..., "left": ..., "right": ...}

hash_mask > 0 truncates every hash for display. A masked document still
parses, but it will not validate against the full digest chain.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, TypeVar, Union

from pydantic import ValidationError

from hashtree.schemas.canonical import canonicalize_value
from hashtree.schemas.codec import ValueCodec
from hashtree.schemas.document import NODE_DOCUMENT_ADAPTER, BranchDocument, LeafDocument
from hashtree.schemas.errors import DocumentDecodeException, ValueDecodeException

from .nodes import EMPTY, Branch, Leaf, Node

logger = logging.getLogger(__name__)

V = TypeVar("V")

COMPACT_SEPARATORS: tuple[str, str] = (",", ":")


def _mask(hash_value: str, hash_mask: int) -> str:
    return hash_value[:hash_mask] if hash_mask else hash_value


def node_to_data(node: Node[V], codec: ValueCodec[V], hash_mask: int = 0) -> Any:
    """
    Convert a node tree to plain JSON-compatible data.

    Key order follows the document schema: leaves are {hash, data},
    branches are {count, hash, left, right}.
    """
    if isinstance(node, Leaf):
        return {
            "hash": _mask(node.hash, hash_mask),
            "data": canonicalize_value(codec.serialize(node.value)),
        }
    if isinstance(node, Branch):
        return {
            "count": node.count,
            "hash": _mask(node.hash, hash_mask),
            "left": node_to_data(node.left, codec, hash_mask),
            "right": node_to_data(node.right, codec, hash_mask),
        }
    return None


def dump_document(
    node: Node[V],
    codec: ValueCodec[V],
    indent: int = 0,
    hash_mask: int = 0,
) -> str:
    """
    Render a node tree as JSON text.

    Args:
        node: Root node
        codec: Value codec for leaf data
        indent: Pretty-print width; 0 renders a single compact line
        hash_mask: Keep only the first N characters of each hash; 0 keeps all

    Raises:
        ValueError: If indent or hash_mask is negative
    """
    if indent < 0:
        raise ValueError(f"indent must be non-negative, got {indent}")
    if hash_mask < 0:
        raise ValueError(f"hash_mask must be non-negative, got {hash_mask}")

    data = node_to_data(node, codec, hash_mask)
    if indent == 0:
        return json.dumps(data, separators=COMPACT_SEPARATORS, ensure_ascii=False)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def _format_errors(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": ".".join(str(part) for part in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in error.errors(include_url=False)
    ]


def _to_node(
    doc: Union[LeafDocument, BranchDocument, None],
    codec: ValueCodec[V],
    path: str,
) -> Node[V]:
    if doc is None:
        return EMPTY
    if isinstance(doc, LeafDocument):
        try:
            value = codec.deserialize(doc.data)
        except Exception as e:
            raise ValueDecodeException(
                message=f"Codec '{codec.name}' rejected leaf data at {path}: {e}",
                path=path,
                details={"error": str(e)},
            ) from e
        return Leaf(value=value, hash=doc.hash)
    return Branch(
        count=doc.count,
        hash=doc.hash,
        left=_to_node(doc.left, codec, f"{path}.left"),
        right=_to_node(doc.right, codec, f"{path}.right"),
    )


def load_document(document: Union[str, bytes], codec: ValueCodec[V]) -> Node[V]:
    """
    Parse JSON text into a node tree.

    Hashes are taken as stored; nothing is recomputed or verified here.

    Raises:
        DocumentDecodeException: On malformed JSON or a schema violation
        ValueDecodeException: If the codec rejects a leaf's data
    """
    try:
        doc: Optional[Union[LeafDocument, BranchDocument]] = NODE_DOCUMENT_ADAPTER.validate_json(
            document
        )
    except ValidationError as e:
        errors = _format_errors(e)
        first = errors[0] if errors else {"loc": "", "msg": str(e)}
        raise DocumentDecodeException(
            message=f"Invalid tree document ({len(errors)} error(s)); first at '{first['loc']}': {first['msg']}",
            path=first["loc"] or None,
            details={"errors": errors},
        ) from e

    node = _to_node(doc, codec, "root")
    logger.debug(f"Parsed tree document with root {type(node).__name__}")
    return node


__all__ = [
    "node_to_data",
    "dump_document",
    "load_document",
]
