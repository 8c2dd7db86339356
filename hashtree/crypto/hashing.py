"""
Module 02 - Hashing Utilities
Digest functions and the digest chain used for every tree hash.

This module provides:
- Hex digest functions over UTF-8 text (sha256, sha512, sha3_256, blake2b, blake2s)
- A name registry so chains can be built from configuration
- DigestChain: an ordered, non-empty sequence of digest functions

Chain Rule (Hard Contract):
    combine([f, g], x) == f(x) + g(x)
Every function sees the SAME input; outputs are concatenated in chain order.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Union

from hashtree.schemas.errors import UnknownDigestException

DigestFunction = Callable[[str], str]


def sha256_hex(data: str) -> str:
    """
    SHA-256 hex digest of UTF-8 text.

    Example:
        >>> sha256_hex("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def sha512_hex(data: str) -> str:
    """SHA-512 hex digest of UTF-8 text."""
    return hashlib.sha512(data.encode("utf-8")).hexdigest()


def sha3_256_hex(data: str) -> str:
    """SHA3-256 hex digest of UTF-8 text."""
    return hashlib.sha3_256(data.encode("utf-8")).hexdigest()


def blake2b_hex(data: str) -> str:
    """BLAKE2b (64-byte) hex digest of UTF-8 text."""
    return hashlib.blake2b(data.encode("utf-8")).hexdigest()


def blake2s_hex(data: str) -> str:
    """BLAKE2s (32-byte) hex digest of UTF-8 text."""
    return hashlib.blake2s(data.encode("utf-8")).hexdigest()


DIGEST_REGISTRY: dict[str, DigestFunction] = {
    "sha256": sha256_hex,
    "sha512": sha512_hex,
    "sha3_256": sha3_256_hex,
    "blake2b": blake2b_hex,
    "blake2s": blake2s_hex,
}


def resolve_digest(name: str) -> DigestFunction:
    """
    Look up a registered digest function by name (case-insensitive).

    Raises:
        UnknownDigestException: If the name is not registered
    """
    key = name.strip().lower().replace("-", "_")
    try:
        return DIGEST_REGISTRY[key]
    except KeyError:
        raise UnknownDigestException(name, available=sorted(DIGEST_REGISTRY)) from None


@dataclass(frozen=True)
class DigestChain:
    """
    Ordered, non-empty sequence of digest functions.

    Fixed for the lifetime of a tree so that every hash in it stays
    comparable. Build one with ``DigestChain.of(...)`` or
    ``DigestChain.from_names(...)``; both fall back to SHA-256 when
    given nothing.

    Attributes:
        functions: Digest functions applied in order
    """
    functions: tuple[DigestFunction, ...]

    def __post_init__(self) -> None:
        """Validate chain structure."""
        if not self.functions:
            raise ValueError("DigestChain requires at least one digest function")

    @classmethod
    def default(cls) -> "DigestChain":
        """Single SHA-256 hex digest."""
        return DEFAULT_CHAIN

    @classmethod
    def of(cls, functions: Optional[Iterable[DigestFunction]] = None) -> "DigestChain":
        """Build a chain from functions; None, empty or plain SHA-256 gives the default chain."""
        funcs = tuple(functions or ())
        if not funcs or funcs == DEFAULT_CHAIN.functions:
            return DEFAULT_CHAIN
        return cls(functions=funcs)

    @classmethod
    def from_names(cls, names: Optional[Iterable[str]] = None) -> "DigestChain":
        """Build a chain from registry names, e.g. ``["sha256", "blake2b"]``."""
        return cls.of(resolve_digest(name) for name in (names or ()))

    def combine(self, data: str) -> str:
        """Apply every function to ``data`` and concatenate the outputs."""
        return "".join(fn(data) for fn in self.functions)

    def __len__(self) -> int:
        return len(self.functions)


DEFAULT_CHAIN = DigestChain(functions=(sha256_hex,))

ChainLike = Union[DigestChain, Sequence[DigestFunction], str, None]


def resolve_chain(chain: ChainLike = None) -> DigestChain:
    """
    Normalize a chain argument.

    Accepts a DigestChain, a sequence of digest functions, a single registry
    name (e.g. "sha256"), or None for the default chain.

    Raises:
        UnknownDigestException: If a name is not registered
        TypeError: If a sequence holds something other than callables
    """
    if isinstance(chain, DigestChain):
        return chain
    if isinstance(chain, str):
        return DigestChain.from_names([chain])
    funcs = tuple(chain or ())
    for fn in funcs:
        if not callable(fn):
            raise TypeError(f"Digest chain entries must be callables, got {type(fn).__name__}")
    return DigestChain.of(funcs)


def combine(chain: ChainLike, data: str) -> str:
    """Functional form of ``DigestChain.combine``."""
    return resolve_chain(chain).combine(data)


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
