"""
Digest functions and the digest chain.
"""
from .hashing import (
    DEFAULT_CHAIN,
    DIGEST_REGISTRY,
    ChainLike,
    DigestChain,
    DigestFunction,
    blake2b_hex,
    blake2s_hex,
    combine,
    resolve_chain,
    resolve_digest,
    sha3_256_hex,
    sha256_hex,
    sha512_hex,
)

__all__ = [
    "DigestFunction",
    "DigestChain",
    "DEFAULT_CHAIN",
    "DIGEST_REGISTRY",
    "ChainLike",
    "sha256_hex",
    "sha512_hex",
    "sha3_256_hex",
    "blake2b_hex",
    "blake2s_hex",
    "resolve_digest",
    "resolve_chain",
    "combine",
]
