"""Rewrite an enchanted region into clickable links."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookweave.enchant.models import ReferenceType
from hookweave.errors import NoActiveEnchantmentError
from hookweave.observability.logging import get_logger
from hookweave.output import Link, Text
from hookweave.style import ENCHANTMENT

if TYPE_CHECKING:
    import re
    from collections.abc import Iterator

    from hookweave.enchant.models import Enchantment
    from hookweave.output import Fragment, OutputNode
    from hookweave.style import StyleContext

log = get_logger(__name__)


def materialize_links(style: StyleContext, link_action: Fragment) -> Iterator[OutputNode]:
    """Re-emit the active enchantment's nodes with the matched parts as links.

    Must run inside a fragment replayed by ``execute``; the most recently
    pushed enchantment is the one being materialized. Each affected text
    node is re-emitted under its own original style so the replacement
    keeps every style the text had. Non-text nodes are dropped.

    Text enchantments are split at match boundaries: gaps become ``Text``
    nodes (empty gaps omitted) and matches become ``Link`` nodes. Hook
    enchantments turn each affected node into a single ``Link``.

    Raises:
        NoActiveEnchantmentError: If no enchantment is in the style context.
    """
    enchantments: list[Enchantment] = style.get_values(ENCHANTMENT)
    if not enchantments:
        raise NoActiveEnchantmentError()
    enchantment = enchantments[-1]

    emitted = 0
    for affected in enchantment.affected:
        if not isinstance(affected, Text):
            continue

        with style.apply_style(affected.style):
            if enchantment.reference_type == ReferenceType.TEXT and enchantment.occurrences:
                for node in split_matches(affected.content, enchantment.occurrences, link_action):
                    emitted += 1
                    yield node
            else:
                emitted += 1
                yield Link(affected.content, link_action)

    log.debug(
        "links_materialized",
        reference_type=enchantment.reference_type.value,
        affected=len(enchantment.affected),
        emitted=emitted,
    )


def split_matches(
    content: str, pattern: re.Pattern[str], link_action: Fragment
) -> Iterator[OutputNode]:
    """Split ``content`` into gap text and link nodes at each match of ``pattern``."""
    start = 0
    for m in pattern.finditer(content):
        if m.start() > start:
            yield Text(content[start : m.start()])
        yield Link(m.group(), link_action)
        start = m.end()

    if start < len(content):
        yield Text(content[start:])
