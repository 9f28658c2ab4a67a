"""A small sample story.

Shows the three enchantment entry points working together: a literal word
turned into links, a hook turned into a link, and a hook enchanted with the
activated link's text when that link is clicked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookweave.enchant import EnchantCommand
from hookweave.story import Story

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hookweave.output import OutputNode


class CellarStory(Story):
    """You stand at the top of the cellar stairs."""

    def start(self) -> Iterator[OutputNode]:
        yield self.text("You stand at the top of the cellar stairs. ")
        with self.in_hook("door"):
            yield self.text("A heavy oak door")
            yield self.text(" blocks the way.")
        yield self.line_break()
        yield self.text("A lantern hangs by the door. The lantern is unlit.")
        yield self.enchant_into_link("lantern", self.light_lantern)
        yield self.enchant_into_link(self.hook_ref("door"), self.open_door)

    def light_lantern(self) -> Iterator[OutputNode]:
        yield self.text("You light the lantern.")
        yield self.enchant_hook("door", EnchantCommand.APPEND, self.hinges_glint)

    def hinges_glint(self) -> Iterator[OutputNode]:
        yield self.text(" Its iron hinges glint.")

    def open_door(self) -> Iterator[OutputNode]:
        yield self.enchant_hook(
            "door",
            EnchantCommand.REPLACE,
            self.door_swings_open,
            wrap=True,
            link_text_prefix=True,
        )

    def door_swings_open(self) -> Iterator[OutputNode]:
        yield self.text(" swings open onto darkness.")
