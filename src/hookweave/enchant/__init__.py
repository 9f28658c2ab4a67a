"""Enchantment engine: match regions, replay fragments over them, turn them into links."""

from hookweave.enchant.executor import execute
from hookweave.enchant.links import materialize_links, split_matches
from hookweave.enchant.matcher import match
from hookweave.enchant.models import (
    EnchantCommand,
    Enchantment,
    HookReference,
    ReferenceDescriptor,
    ReferenceType,
    TextReference,
    resolve_reference,
)

__all__ = [
    "EnchantCommand",
    "Enchantment",
    "HookReference",
    "ReferenceDescriptor",
    "ReferenceType",
    "TextReference",
    "execute",
    "match",
    "materialize_links",
    "resolve_reference",
    "split_matches",
]
