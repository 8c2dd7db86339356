"""
Module 01 - Schemas & Codecs
File: document.py

Purpose: Pydantic schema for serialized tree documents.

    Node      := null | LeafObj | BranchObj
    LeafObj   := { "hash": string, "data": <codec value> }
    BranchObj := { "count": integer, "hash": string, "left": Node, "right": Node }

Models forbid extra keys, so the leaf and branch shapes cannot be confused
when validating the union.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, TypeAdapter


class LeafDocument(BaseModel):
    """Serialized occupied leaf."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    hash: StrictStr = Field(
        ...,
        description="Digest-chain output over the canonical leaf data (may be display-truncated)",
    )
    data: Any = Field(
        ...,
        description="Codec-serialized value",
    )


class BranchDocument(BaseModel):
    """Serialized internal node."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    count: StrictInt = Field(
        ...,
        ge=0,
        description="Number of occupied leaves in this subtree",
    )
    hash: StrictStr = Field(
        ...,
        description="Digest-chain output over the children's hashes",
    )
    left: Optional[Union[LeafDocument, "BranchDocument"]] = Field(...)
    right: Optional[Union[LeafDocument, "BranchDocument"]] = Field(...)


NodeDocument = Optional[Union[LeafDocument, BranchDocument]]

NODE_DOCUMENT_ADAPTER: TypeAdapter[NodeDocument] = TypeAdapter(NodeDocument)


__all__ = [
    "LeafDocument",
    "BranchDocument",
    "NodeDocument",
    "NODE_DOCUMENT_ADAPTER",
]
