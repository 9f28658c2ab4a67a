"""Error types raised by the enchantment runtime.

Unmatched references, empty histories and zero-occurrence text patterns are
not errors: hooks may legitimately not exist yet when an enchantment is
requested. The types below cover misuse of the runtime itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - used at runtime


class HookweaveError(Exception):
    """Base class for all runtime errors."""


@dataclass
class StyleContextError(HookweaveError):
    """Raised when a style scope is released out of stack order.

    Only raised when ``strict_context`` is enabled; otherwise the runtime
    logs a warning and removes the frame anyway.

    Attributes:
        keys: Style keys carried by the offending frame.
        depth: Stack depth at the moment of release.
    """

    keys: tuple[str, ...]
    depth: int

    def __post_init__(self) -> None:
        keys = ", ".join(self.keys) or "<empty>"
        super().__init__(f"Style frame ({keys}) released out of order at depth {self.depth}")


class NoActiveEnchantmentError(HookweaveError):
    """Raised when link materialization runs outside an enchantment replay."""

    def __init__(self) -> None:
        super().__init__(
            "No enchantment in the current style context; "
            "materialize_links must run inside an enchantment fragment"
        )


class NoLinkInActionError(HookweaveError):
    """Raised when the link text is requested while no link is being activated."""

    def __init__(self, hook_name: str) -> None:
        self.hook_name = hook_name
        super().__init__(f"Cannot prefix hook '{hook_name}' with link text: no link is active")


@dataclass
class FragmentDepthError(HookweaveError):
    """Raised when embedded fragments nest deeper than the configured limit.

    Attributes:
        limit: The configured ``max_embed_depth``.
    """

    limit: int

    def __post_init__(self) -> None:
        super().__init__(f"Embedded fragments nested deeper than {self.limit} levels")


class ConfigError(HookweaveError):
    """Raised when engine configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")
