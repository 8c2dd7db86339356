"""
Runtime Configuration

Defaults for building digest chains and rendering documents. The tree
engine never reads this module; callers turn a config into arguments.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from hashtree.crypto.hashing import DigestChain, resolve_digest
from hashtree.schemas.errors import ConfigurationException


@dataclass
class DigestConfig:
    """Digest chain configuration (registry names, applied in order)."""
    names: list[str] = field(default_factory=lambda: ["sha256"])

    def __post_init__(self):
        # Fail early on typos rather than at first hash
        for name in self.names:
            resolve_digest(name)


@dataclass
class DocumentConfig:
    """Configuration for document rendering."""
    indent: int = 0
    hash_mask: int = 0

    def __post_init__(self):
        if self.indent < 0:
            raise ConfigurationException(f"indent must be non-negative, got {self.indent}", key="indent")
        if self.hash_mask < 0:
            raise ConfigurationException(
                f"hash_mask must be non-negative, got {self.hash_mask}", key="hash_mask"
            )


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationException(f"{key} must be an integer, got {raw!r}", key=key) from None


@dataclass
class TreeConfig:
    """
    Complete configuration for the hash tree library.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    digest: DigestConfig = field(default_factory=DigestConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    depth_hint: int = 1
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - HASHTREE_DIGESTS: comma-separated digest names (e.g. "sha256,blake2b")
        - HASHTREE_INDENT: document indent width
        - HASHTREE_HASH_MASK: document hash truncation length
        - HASHTREE_DEPTH_HINT: spine depth for singleton trees
        """
        overrides: dict[str, Any] = {}

        if os.getenv("HASHTREE_DIGESTS"):
            names = [n.strip() for n in os.getenv("HASHTREE_DIGESTS", "").split(",") if n.strip()]
            overrides.setdefault("digest", {})["names"] = names

        if os.getenv("HASHTREE_INDENT"):
            overrides.setdefault("document", {})["indent"] = _parse_int(
                "HASHTREE_INDENT", os.getenv("HASHTREE_INDENT", "")
            )
        if os.getenv("HASHTREE_HASH_MASK"):
            overrides.setdefault("document", {})["hash_mask"] = _parse_int(
                "HASHTREE_HASH_MASK", os.getenv("HASHTREE_HASH_MASK", "")
            )

        if os.getenv("HASHTREE_DEPTH_HINT"):
            overrides["depth_hint"] = _parse_int(
                "HASHTREE_DEPTH_HINT", os.getenv("HASHTREE_DEPTH_HINT", "")
            )

        return overrides

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "TreeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        if dotenv:
            load_dotenv()
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "TreeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(f"Config file must contain a mapping: {path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TreeConfig":
        """Create configuration from a dictionary."""
        digest_data = data.get("digest", {})
        document_data = data.get("document", {})

        try:
            digest = DigestConfig(**digest_data) if digest_data else DigestConfig()
            document = DocumentConfig(**document_data) if document_data else DocumentConfig()
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration section: {e}") from e

        depth_hint = data.get("depth_hint", 1)
        if not isinstance(depth_hint, int) or depth_hint < 0:
            raise ConfigurationException(
                f"depth_hint must be a non-negative integer, got {depth_hint!r}", key="depth_hint"
            )

        return cls(
            digest=digest,
            document=document,
            depth_hint=depth_hint,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "TreeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "digest" in overrides:
            new_config.digest = DigestConfig(**overrides["digest"])

        if "document" in overrides:
            for key, value in overrides["document"].items():
                setattr(new_config.document, key, value)
            # Re-run range checks on the patched section
            new_config.document = DocumentConfig(
                indent=new_config.document.indent,
                hash_mask=new_config.document.hash_mask,
            )

        if "depth_hint" in overrides:
            new_config.depth_hint = overrides["depth_hint"]

        return new_config

    def build_chain(self) -> DigestChain:
        """Digest chain for the configured names."""
        return DigestChain.from_names(self.digest.names)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "digest": {
                "names": list(self.digest.names),
            },
            "document": {
                "indent": self.document.indent,
                "hash_mask": self.document.hash_mask,
            },
            "depth_hint": self.depth_hint,
            "extra": self.extra,
        }
