"""Replay a fragment once per enchantment."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookweave.observability.logging import get_logger
from hookweave.style import ENCHANTMENT

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from hookweave.enchant.models import Enchantment
    from hookweave.output import Fragment, OutputNode
    from hookweave.style import StyleContext

log = get_logger(__name__)


def execute(
    enchantments: Iterable[Enchantment],
    fragment: Fragment,
    style: StyleContext,
) -> Iterator[OutputNode]:
    """Lazily replay ``fragment`` under each enchantment in turn.

    Each enchantment is pushed onto ``style`` under the ``enchantment`` key
    for exactly the span of its replay, so every node the fragment produces
    carries it. The frame is released even if the consumer stops early.

    Args:
        enchantments: Matched regions, in output order.
        fragment: Called once per enchantment for a fresh node sequence.
        style: Ambient style context of the running story thread.

    Yields:
        The fragment's nodes, enchantment by enchantment.
    """
    for index, enchantment in enumerate(enchantments):
        with style.apply(ENCHANTMENT, enchantment):
            log.debug("enchantment_replayed", index=index, enchantment=str(enchantment))
            yield from fragment()
