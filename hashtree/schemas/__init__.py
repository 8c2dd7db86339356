"""
Schemas & Codecs

Error taxonomy, canonical JSON, value codecs and the tree document schema.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)
from .codec import (
    BYTES_CODEC,
    INT_CODEC,
    JSON_CODEC,
    STR_CODEC,
    ValueCodec,
    pydantic_codec,
)
from .document import (
    NODE_DOCUMENT_ADAPTER,
    BranchDocument,
    LeafDocument,
    NodeDocument,
)
from .errors import (
    CanonicalizationException,
    ConfigurationException,
    DocumentDecodeException,
    ErrorCodes,
    HashTreeException,
    InvariantViolationException,
    TreeError,
    UnknownDigestException,
    ValueDecodeException,
)

__all__ = [
    # Canonical JSON
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Codecs
    "ValueCodec",
    "INT_CODEC",
    "STR_CODEC",
    "BYTES_CODEC",
    "JSON_CODEC",
    "pydantic_codec",
    # Document schema
    "LeafDocument",
    "BranchDocument",
    "NodeDocument",
    "NODE_DOCUMENT_ADAPTER",
    # Errors
    "ErrorCodes",
    "TreeError",
    "HashTreeException",
    "CanonicalizationException",
    "DocumentDecodeException",
    "ValueDecodeException",
    "InvariantViolationException",
    "UnknownDigestException",
    "ConfigurationException",
]
