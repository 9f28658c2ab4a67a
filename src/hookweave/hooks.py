"""Hook markers and the hook registry.

A hook is a named region of output. Every time a hook scope is entered a
new activation is created; nodes produced inside the scope carry that
activation under the ``hook`` style key. Two activations with the same
name are distinct regions.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hookweave.style import HOOK, Style

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hookweave.output import OutputNode


@dataclass(frozen=True)
class Hook:
    """One activation of a named hook.

    Attributes:
        name: Hook name chosen by the story author.
        activation: Id distinguishing activations within one story thread.
    """

    name: str
    activation: int

    def __str__(self) -> str:
        return f"?{self.name}"


class HookActivations:
    """Issues hook activations for one story thread, numbered from 1."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def activate(self, name: str) -> Hook:
        """Create a fresh activation of ``name``."""
        return Hook(name=str(name), activation=next(self._ids))


def find_hook(style: Style, name: str) -> Hook | None:
    """Return the first hook entry in ``style`` named ``name``, if any."""
    found = style.first(HOOK, lambda h: isinstance(h, Hook) and h.name == name)
    return found if isinstance(found, Hook) else None


class HookRegistry:
    """Index of hook names to the nodes tagged with them.

    Built from an output history; each activation keeps its nodes in
    output order, and activations are kept in order of first appearance.
    """

    def __init__(self) -> None:
        self._by_name: dict[str, dict[Hook, list[OutputNode]]] = {}
        self._ordered: dict[str, list[OutputNode]] = {}

    @classmethod
    def from_output(cls, nodes: Iterable[OutputNode]) -> HookRegistry:
        registry = cls()
        for node in nodes:
            for hook in node.style.get_values(HOOK):
                if isinstance(hook, Hook):
                    registry._tag(hook, node)
        return registry

    def _tag(self, hook: Hook, node: OutputNode) -> None:
        self._by_name.setdefault(hook.name, {}).setdefault(hook, []).append(node)
        ordered = self._ordered.setdefault(hook.name, [])
        # A node nested in two activations of one name is listed once
        if not ordered or ordered[-1] is not node:
            ordered.append(node)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def names(self) -> list[str]:
        return list(self._by_name)

    def activations(self, name: str) -> list[Hook]:
        """Activations of ``name`` in order of first appearance."""
        return list(self._by_name.get(name, {}))

    def nodes(self, name: str, activation: Hook | None = None) -> list[OutputNode]:
        """Nodes tagged ``name`` in output order, optionally for one activation."""
        if activation is not None:
            return list(self._by_name.get(name, {}).get(activation, []))
        return list(self._ordered.get(name, []))
