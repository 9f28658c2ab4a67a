"""Tests for turning enchanted regions into links."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hookweave.enchant import (
    EnchantCommand,
    HookReference,
    TextReference,
    execute,
    match,
    materialize_links,
    split_matches,
)
from hookweave.errors import NoActiveEnchantmentError
from hookweave.hooks import HookActivations
from hookweave.output import Link, Text
from hookweave.style import HOOK, Style, StyleContext

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hookweave.output import OutputNode


_activate = HookActivations().activate


def link_action() -> Iterator[OutputNode]:
    yield Text("clicked")


def _materialize(nodes: list[OutputNode], reference, style: StyleContext) -> list[OutputNode]:
    enchantments = match(nodes, reference, EnchantCommand.REPLACE)
    return list(execute(enchantments, lambda: materialize_links(style, link_action), style))


class TestTextMaterialization:
    """Tests for splitting text enchantments at match boundaries."""

    def test_single_match_in_middle(self) -> None:
        """Gap text, link, trailing text."""
        style = StyleContext()

        produced = _materialize([Text("Go north or south.")], TextReference("north"), style)

        assert produced == [
            Text("Go "),
            Link("north", link_action),
            Text(" or south."),
        ]

    def test_empty_gaps_omitted(self) -> None:
        """Matches at the edges or back to back produce no empty text."""
        style = StyleContext()

        produced = _materialize([Text("abab")], TextReference("ab"), style)

        assert produced == [Link("ab", link_action), Link("ab", link_action)]

    def test_concatenation_reconstructs_content(self) -> None:
        """Joining every emitted node's text gives back the original."""
        content = "the cat sat on the mat by the door"
        style = StyleContext()

        produced = _materialize([Text(content)], TextReference("the"), style)

        assert "".join(n.text for n in produced) == content
        assert [n.text for n in produced if isinstance(n, Link)] == ["the", "the", "the"]

    def test_matches_do_not_overlap(self) -> None:
        """Scanning is leftmost-first and non-overlapping."""
        produced = list(split_matches("aaa", TextReference("aa").pattern(), link_action))

        assert produced == [Link("aa", link_action), Text("a")]

    def test_empty_literal_links_between_characters(self) -> None:
        """An empty literal yields zero-length links and keeps the text intact."""
        style = StyleContext()

        produced = _materialize([Text("ab")], TextReference(""), style)

        assert produced == [
            Link("", link_action),
            Text("a"),
            Link("", link_action),
            Text("b"),
            Link("", link_action),
        ]
        assert "".join(n.text for n in produced) == "ab"

    def test_each_node_split_separately(self) -> None:
        """Two matching nodes are materialized in output order."""
        style = StyleContext()

        produced = _materialize(
            [Text("north"), Text("far north")], TextReference("north"), style
        )

        assert [n.text for n in produced] == ["north", "far ", "north"]

    def test_original_style_reestablished(self) -> None:
        """Replacement nodes are produced under the original node's style."""
        style = StyleContext()
        original = Text("Go north.", style=Style([("color", "red")]))
        seen: list[list[str]] = []

        enchantments = match([original], TextReference("north"))
        replay = execute(enchantments, lambda: materialize_links(style, link_action), style)
        for _ in replay:
            seen.append(style.get_values("color"))

        assert seen == [["red"], ["red"], ["red"]]
        assert style.depth == 0


class TestHookMaterialization:
    """Tests for turning hook enchantments into whole-node links."""

    def test_one_link_per_affected_text(self) -> None:
        """Each affected text node becomes a single link with its full text."""
        door = _activate("door")
        nodes = [
            Text("A heavy door", style=Style([(HOOK, door)])),
            Text(" blocks the way.", style=Style([(HOOK, door)])),
        ]
        style = StyleContext()

        produced = _materialize(nodes, HookReference("door"), style)

        assert produced == [
            Link("A heavy door", link_action),
            Link(" blocks the way.", link_action),
        ]

    def test_non_text_affected_nodes_dropped(self) -> None:
        """Links inside the hook are not re-emitted."""
        door = _activate("door")
        nodes = [
            Link("knock", style=Style([(HOOK, door)])),
            Text("door", style=Style([(HOOK, door)])),
        ]
        style = StyleContext()

        produced = _materialize(nodes, HookReference("door"), style)

        assert produced == [Link("door", link_action)]


class TestMaterializeContext:
    """Tests for context handling in materialize_links."""

    def test_without_enchantment_raises(self) -> None:
        """Materializing outside an enchantment replay is an error."""
        with pytest.raises(NoActiveEnchantmentError):
            list(materialize_links(StyleContext(), link_action))

    def test_abandonment_releases_node_style(self) -> None:
        """Closing mid-node pops both the node style and the enchantment."""
        style = StyleContext()
        original = Text("north and north", style=Style([("color", "red")]))
        enchantments = match([original], TextReference("north"))
        replay = execute(enchantments, lambda: materialize_links(style, link_action), style)

        next(replay)
        assert style.depth == 2

        replay.close()
        assert style.depth == 0
