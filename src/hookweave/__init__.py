"""hookweave: enchant rendered story output with hooks, text matches and links."""

from hookweave.enchant import (
    EnchantCommand,
    Enchantment,
    HookReference,
    ReferenceType,
    TextReference,
)
from hookweave.hooks import Hook, HookActivations, HookRegistry
from hookweave.output import EmbedFragment, LineBreak, Link, OutputNode, Text
from hookweave.story import Story
from hookweave.style import Style, StyleContext

__version__ = "0.1.0"

__all__ = [
    "EmbedFragment",
    "EnchantCommand",
    "Enchantment",
    "Hook",
    "HookActivations",
    "HookReference",
    "HookRegistry",
    "LineBreak",
    "Link",
    "OutputNode",
    "ReferenceType",
    "Story",
    "Style",
    "StyleContext",
    "Text",
    "TextReference",
    "__version__",
]
