"""Enchantment records and reference descriptors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from hookweave.hooks import Hook

if TYPE_CHECKING:
    from hookweave.output import OutputNode


class EnchantCommand(Enum):
    """What an enchantment does to the region it matched."""

    NONE = "none"
    REPLACE = "replace"
    APPEND = "append"
    PREPEND = "prepend"


class ReferenceType(Enum):
    """How an enchantment's region was located."""

    TEXT = "text"
    HOOK = "hook"
    OTHER = "other"


@dataclass(frozen=True)
class HookReference:
    """Reference to every node inside hooks named ``name``."""

    name: str


@dataclass(frozen=True)
class TextReference:
    """Reference to literal occurrences of ``literal`` in rendered text."""

    literal: str

    def pattern(self) -> re.Pattern[str]:
        """Compile the literal into a pattern with no special characters."""
        return re.compile(re.escape(self.literal))


ReferenceDescriptor = HookReference | TextReference


def resolve_reference(value: Any) -> ReferenceDescriptor:
    """Turn a caller-supplied reference into a descriptor.

    Hook references and hook handles resolve to a ``HookReference``; any
    other value is matched as text using its string form.
    """
    if isinstance(value, (HookReference, TextReference)):
        return value
    if isinstance(value, Hook):
        return HookReference(value.name)
    return TextReference(str(value))


@dataclass
class Enchantment:
    """A matched region: one or more output nodes grouped by a reference.

    Attributes:
        reference_type: Whether the region was found by hook or by text.
        command: The command the region was enchanted with.
        affected: Matched nodes in output order.
        hook: The hook activation shared by ``affected`` (hook references only).
        occurrences: Pattern locating the match spans (text references only).
    """

    reference_type: ReferenceType
    command: EnchantCommand
    affected: list[OutputNode] = field(default_factory=list)
    hook: Hook | None = None
    occurrences: re.Pattern[str] | None = None

    def __str__(self) -> str:
        return (
            f"{self.command.value} {self.reference_type.value} "
            f"(affects {len(self.affected)})"
        )
