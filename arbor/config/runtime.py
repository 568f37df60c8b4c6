"""
Runtime Configuration

Hash function selection and logging level for Arbor.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from arbor.crypto.hashing import DEFAULT_HASH_ALGORITHM, Hasher, LEAF_TAG, NODE_TAG
from arbor.schemas.errors import ConfigurationError

load_dotenv()


ENV_PREFIX = "ARBOR_"


@dataclass
class HashConfig:
    """Hash function and domain-separation tags (tags as hex strings)."""
    algorithm: str = DEFAULT_HASH_ALGORITHM
    leaf_tag: str = LEAF_TAG.hex()
    node_tag: str = NODE_TAG.hex()

    def to_hasher(self) -> Hasher:
        """
        Build a validated Hasher from this configuration.

        Raises:
            ConfigurationError: If a tag is not a valid hex string
            HashConfigurationError: If the algorithm or tags are unusable
        """
        for name in ("leaf_tag", "node_tag"):
            tag = getattr(self, name)
            # YAML reads an unquoted 00 / 01 as an int
            if not isinstance(tag, str):
                raise ConfigurationError(
                    f"{name} must be a quoted hex string (e.g. {name}: \"00\"), "
                    f"got {type(tag).__name__} {tag!r}",
                    source="hashing",
                    details={"tag": name},
                )
        try:
            leaf_tag = bytes.fromhex(self.leaf_tag)
            node_tag = bytes.fromhex(self.node_tag)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Hash tags must be hex strings: {e}",
                source="hashing",
            ) from e
        return Hasher(algorithm=self.algorithm, leaf_tag=leaf_tag, node_tag=node_tag)


@dataclass
class LoggingConfig:
    """Logging configuration for the ``arbor`` logger hierarchy."""
    level: str = "WARNING"

    def apply(self) -> None:
        """
        Set the level of the ``arbor`` logger.

        Handlers are left to the application.
        """
        level = logging.getLevelName(self.level.upper())
        if not isinstance(level, int):
            raise ConfigurationError(
                f"Unknown log level: {self.level!r}",
                source="logging",
            )
        logging.getLogger("arbor").setLevel(level)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hashing: HashConfig = field(default_factory=HashConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - ARBOR_HASH_ALGORITHM: hashlib algorithm name
        - ARBOR_LEAF_TAG: Leaf tag as hex (default "00")
        - ARBOR_NODE_TAG: Node tag as hex (default "01")
        - ARBOR_LOG_LEVEL: Level for the "arbor" logger
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("hashing", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}LEAF_TAG"):
            overrides.setdefault("hashing", {})["leaf_tag"] = os.getenv(f"{ENV_PREFIX}LEAF_TAG")
        if os.getenv(f"{ENV_PREFIX}NODE_TAG"):
            overrides.setdefault("hashing", {})["node_tag"] = os.getenv(f"{ENV_PREFIX}NODE_TAG")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}", source=str(path)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping, got {type(data).__name__}",
                source=str(path),
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hashing_data = data.get("hashing") or {}
        logging_data = data.get("logging") or {}

        try:
            hashing = HashConfig(**hashing_data) if hashing_data else HashConfig()
            logging_config = LoggingConfig(**logging_data) if logging_data else LoggingConfig()
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

        return cls(
            hashing=hashing,
            logging=logging_config,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        if "hashing" in overrides:
            for key, value in overrides["hashing"].items():
                setattr(new_config.hashing, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_hasher(self) -> Hasher:
        """Hasher described by the ``hashing`` section."""
        return self.hashing.to_hasher()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hashing": {
                "algorithm": self.hashing.algorithm,
                "leaf_tag": self.hashing.leaf_tag,
                "node_tag": self.hashing.node_tag,
            },
            "logging": {
                "level": self.logging.level,
            },
            "extra": self.extra,
        }
