"""Engine configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from ruamel.yaml import YAML

from hookweave.errors import ConfigError

# Default configuration values
DEFAULT_MAX_EMBED_DEPTH = 64
DEFAULT_CONFIG_FILE = "hookweave.yaml"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_depth(value: Any, name: str) -> int:
    try:
        depth = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
    if depth < 1:
        raise ValueError(f"{name} must be at least 1, got {depth}")
    return depth


@dataclass
class EngineConfig:
    """Runtime settings for a story thread.

    Resolution order for each field:
    1. Environment variable (e.g., HOOKWEAVE_MAX_EMBED_DEPTH)
    2. Config file value
    3. Default

    Attributes:
        max_embed_depth: How deeply embedded fragments may nest before the
            thread fails with ``FragmentDepthError``.
        strict_context: Raise instead of warning when a style scope is
            released out of stack order.
    """

    max_embed_depth: int = DEFAULT_MAX_EMBED_DEPTH
    strict_context: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Create config from dictionary, applying environment overrides.

        Args:
            data: Mapping with optional ``max_embed_depth`` and ``strict_context``.

        Returns:
            EngineConfig instance.

        Raises:
            ValueError: If a value cannot be interpreted.
        """
        depth = os.getenv("HOOKWEAVE_MAX_EMBED_DEPTH") or data.get(
            "max_embed_depth", DEFAULT_MAX_EMBED_DEPTH
        )
        strict = os.getenv("HOOKWEAVE_STRICT_CONTEXT") or data.get("strict_context", False)
        return cls(
            max_embed_depth=_parse_depth(depth, "max_embed_depth"),
            strict_context=_parse_bool(strict, "strict_context"),
        )

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Defaults plus environment overrides."""
        return cls.from_dict({})


def load_config(path: Path) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        EngineConfig instance.

    Raises:
        ConfigError: If config cannot be loaded.
    """
    if not path.exists():
        raise ConfigError(path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            raise ConfigError(path, "Empty file")
        if not isinstance(data, dict):
            raise ConfigError(path, "Top level must be a mapping")

        return EngineConfig.from_dict(dict(data))
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(path, str(e)) from e
