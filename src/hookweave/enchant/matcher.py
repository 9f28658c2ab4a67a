"""Locate enchantable regions in an output history."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookweave.enchant.models import (
    EnchantCommand,
    Enchantment,
    HookReference,
    ReferenceDescriptor,
    ReferenceType,
    TextReference,
)
from hookweave.hooks import find_hook
from hookweave.observability.logging import get_logger
from hookweave.output import Text

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hookweave.output import OutputNode

log = get_logger(__name__)


def match(
    output: Iterable[OutputNode],
    reference: ReferenceDescriptor,
    command: EnchantCommand = EnchantCommand.NONE,
) -> list[Enchantment]:
    """Group the nodes of ``output`` matched by ``reference`` into enchantments.

    Hook references merge consecutive matches that share the same hook
    activation; a different activation (even with the same name) starts a
    new enchantment. Text references produce one enchantment per text node
    containing the literal. Unmatched nodes are skipped.

    Args:
        output: Output history to scan, in production order.
        reference: What to look for.
        command: Command recorded on every produced enchantment.

    Returns:
        Enchantments in output order. Empty when nothing matches.
    """
    if isinstance(reference, HookReference):
        enchantments = _match_hook(output, reference.name, command)
    else:
        enchantments = _match_text(output, reference, command)

    log.debug(
        "enchant_matched",
        reference=repr(reference),
        command=command.value,
        enchantments=len(enchantments),
    )
    return enchantments


def _match_hook(
    output: Iterable[OutputNode], name: str, command: EnchantCommand
) -> list[Enchantment]:
    enchantments: list[Enchantment] = []
    last: Enchantment | None = None

    for node in output:
        hook = find_hook(node.style, name)
        if hook is None:
            continue

        if last is None or last.hook != hook:
            last = Enchantment(
                reference_type=ReferenceType.HOOK,
                command=command,
                hook=hook,
            )
            enchantments.append(last)

        last.affected.append(node)

    return enchantments


def _match_text(
    output: Iterable[OutputNode], reference: TextReference, command: EnchantCommand
) -> list[Enchantment]:
    occurrences = reference.pattern()
    return [
        Enchantment(
            reference_type=ReferenceType.TEXT,
            command=command,
            affected=[node],
            occurrences=occurrences,
        )
        for node in output
        if isinstance(node, Text) and occurrences.search(node.content)
    ]
